"""
Tokyo Tyrant Protocol Layer
===========================

This package defines the binary request/response protocol spoken by a
Tokyo Tyrant server: how commands are serialized into request frames, and
how response frames are turned back into typed results.

The protocol layer performs no I/O and MUST NOT depend on any transport
implementation.

---------------------------------------------------------------------

Layer Architecture Overview
---------------------------

Client (client.py)
    One method per command
    - Hash: plain key/value database
    - Table: tabular database, queries

    │
    ▼
Pipeline (pipeline.py)
    FIFO queue of tasks, one in flight per connection

    │
    ▼
Protocol (this package)
    - request.py    command -> frame
    - response.py   frame -> Result
    - query.py      search clause builder
    - message.py    Task / Result
    - record.py     multi-value fields, table records
    - buffer.py     big-endian Writer / Reader
    - constants.py  opcodes, status codes, option flags

    │
    ▼
Transport (transport/)
    Moves bytes
    - plain TCP
    - ZeroMQ STREAM socket

---------------------------------------------------------------------

Frame Layout
------------

Requests:   [0xC8][opcode][fixed-width fields...][variable-length fields...]
Responses:  [status:1][command-specific fields...]

All integers are big-endian.

---------------------------------------------------------------------
"""

from . import constants
from . import errors
from . import buffer
from . import record
from . import message
from . import request
from . import response
from . import query

from .constants import Command, Status
from .message import Result, Task
from .query import Query


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
