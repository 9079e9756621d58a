''' Wrapper module for the JSON codec, mirroring :func:`json.loads` and
    :func:`json.dumps`. Like the msgspec encoder it is built on, 'dumps'
    returns bytes.
'''

import msgspec


_encoder = msgspec.json.Encoder()
_decoder = msgspec.json.Decoder()

dumps = _encoder.encode
loads = _decoder.decode

DecodeError = msgspec.DecodeError

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
