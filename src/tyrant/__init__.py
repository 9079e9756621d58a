""" Python client for the Tokyo Tyrant binary protocol. This includes the
    protocol codec itself, the pipeline that sequences requests over a
    single connection, and client classes for plain key/value and tabular
    databases.
"""

# Utility components.

from . import json
from . import config

# Submodules used by multiple other components.

from . import protocol
from . import transport
from .pipeline import Pipeline

# Primary public-facing interfaces.

from .client import Hash, Table
from .protocol import Command, Query, Result, Status
from .protocol.errors import ArgumentError, ProtocolError, StatusError, TyrantError
from .protocol.record import MultiValue, Record

from . import begin
connect = begin.connect

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
