""" Value types for the tabular side of the protocol. Tables transmit
    multiple columns inside a single value, joined with NUL bytes; these
    classes make that encoding explicit instead of splitting strings at
    every call site.
"""


def _separator(value):
    if isinstance(value, str):
        return '\0'
    return b'\0'



class MultiValue(list):
    """ A value made up of NUL-separated segments. An empty value has no
        segments at all, rather than a single empty segment.
    """

    @classmethod
    def split(cls, value):

        if not value:
            return cls()

        return cls(value.split(_separator(value)))


# end of class MultiValue



class Record(dict):
    """ A table record: a mapping of column names to values, plus the
        primary key it is stored under.

        :ivar pkey: The primary key, or None if the server did not send one.
    """

    def __init__(self, columns=(), pkey=None):
        dict.__init__(self, columns)
        self.pkey = pkey


    def __repr__(self):
        return 'Record(%r, pkey=%r)' % (dict(self), self.pkey)


    def __eq__(self, other):
        if isinstance(other, Record) and other.pkey != self.pkey:
            return False
        return dict.__eq__(self, other)


    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result


    __hash__ = None


    @classmethod
    def from_pairs(cls, elements, pkey=None):
        """ Build a record from an alternating sequence of column names and
            values, as returned by the table ``get`` function. A column with
            an empty name is the primary key.
        """

        record = cls(pkey=pkey)
        elements = list(elements)

        if len(elements) % 2 != 0:
            raise ValueError('odd number of elements in column list: %d' % (len(elements)))

        for index in range(0, len(elements), 2):
            name = elements[index]
            value = elements[index + 1]

            if not name:
                record.pkey = value
            else:
                record[name] = value

        return record


    @classmethod
    def from_row(cls, row):
        """ Build a record from a single NUL-joined search result row. """

        return cls.from_pairs(MultiValue.split(row))


    def flatten(self):
        """ Return the argument list used to store this record with a table
            ``put``: the primary key, followed by alternating column names
            and values.
        """

        flat = [self.pkey]
        for name, value in self.items():
            flat.append(name)
            flat.append(value)

        return flat


# end of class Record


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
