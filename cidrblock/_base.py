"""Shared building blocks for the IPv4 and IPv6 address families.

This module holds the exceptions, the literal helpers and the base
classes for addresses and CIDR blocks.  All of the integer arithmetic
lives here; the family modules only describe their widths and provide
the string parsing and formatting for their literal encodings.
"""

import logging
import re

_logger = logging.getLogger(__name__)

# =============================================================================
# Module specific exceptions
# =============================================================================

class AddressValueError(ValueError):
    """An address literal failed validation.

    Attributes:
        literal: the offending literal, exactly as it was supplied.
    """

    _family = 'IP'

    def __init__(self, literal, reason=None):
        msg = '%r is not a valid %s address' % (literal, self._family)
        if reason:
            msg = '%s: %s' % (msg, reason)
        super().__init__(msg)
        self.literal = literal

class CidrValueError(ValueError):
    """A CIDR literal failed validation.

    Raised for a literal of the wrong shape, an invalid embedded address
    or a missing or out of range prefix length.

    Attributes:
        literal: the offending literal, exactly as it was supplied.
    """

    _family = 'IP'

    def __init__(self, literal, reason=None):
        msg = '%r is not a valid %s CIDR range' % (literal, self._family)
        if reason:
            msg = '%s: %s' % (msg, reason)
        super().__init__(msg)
        self.literal = literal

class CidrRangeError(ValueError):
    """A prefix length is out of bounds for a subnetting operation."""

# =============================================================================
# Utility functions
# =============================================================================

_DEC_DIGITS = frozenset('0123456789')
_HEX_DIGITS = frozenset('0123456789ABCDEFabcdef')

def isdecdigit(txt):
    """Returns True if all characters are ASCII decimal digits"""
    for digit in txt:
        if digit not in _DEC_DIGITS:
            return False
    # an empty string is not decimal
    return txt != ''

def ishexdigit(txt):
    """Returns True if all characters are hex digits"""
    for digit in txt:
        if digit not in _HEX_DIGITS:
            return False
    # an empty string is not hex
    return txt != ''

def is_integer(value):
    """Returns True if value is an int, bools excluded."""
    return isinstance(value, int) and not isinstance(value, bool)

_prefix_re = re.compile(r'\s*([+-]?)0*([0-9]+)', re.ASCII)

def prefix_from_string(txt):
    """Convert the prefix part of an "address/prefix" string.

    Only the leading integer of the string is used: leading white space
    and a sign are allowed, and anything after the first non-digit is
    ignored, so '24.5' and '24abc' both give 24.

    No prefix length has more than 3 digits, so longer integers are cut
    to their first 4 significant digits; the result is still out of
    range, with the same sign.

    Args:
        txt: The text following the '/'

    Returns:
        The prefix as an integer, or None if txt has no leading integer.
    """
    m = _prefix_re.match(txt)
    if m is None:
        return None
    sign, digits = m.groups()
    return int(sign + digits[:4], 10)

# =============================================================================
# Base class for addresses and CIDR blocks
# =============================================================================

class _BaseIP:
    """A base class for IP addresses and CIDR blocks.

    The following attributes must be provided by derived classes:
        _version        The IP version number, 4 or 6
        _address_len    The address length, in bits
    The following methods must be implemented in derived classes:
        __str__         Return the value as a string
    """

    __slots__ = ()

    def __repr__(self):
        """A string representation of this object."""
        return "%s('%s')" % (self.__class__.__name__, self.__str__())

    @property
    def version(self):
        """The IP version of this object."""
        return self._version

    @property
    def max_prefixlen(self):
        """Returns the maximum prefix length for CIDRs of this type."""
        return self._address_len

    @property
    def compressed(self):
        """The short string representation of this object."""
        return self.__str__()

# =============================================================================
# Address base class
# =============================================================================

class _BaseAddress(_BaseIP):
    """A base class for an IP Address, do not instantiate directly.

    Every address literal is normalised to a single unsigned integer,
    held in the '_ip' slot; everything else is derived from it.

    The following attributes must be provided by derived classes:
        _version        The IP version number, 4 or 6
        _address_len    The address length, in bits
        _max_address    The maximum integer value for this address type
        _group_bits     The number of bits in each group (octet/hextet)
        _group_count    The number of groups in an address
        _separator      The group separator for binary strings
        _error          The AddressValueError subclass for the family
    The following methods must be implemented in derived classes:
        from_string     Convert an address string to an integer
        _to_string      Convert an integer to an address string
    """

    __slots__ = ()

    def __init__(self, address):
        """Instantiate a new IP address.

        Args:
            address: an address of the same family, or an address
                literal: a string, an integer or a sequence of groups.

        Raises:
            AddressValueError: if address is not a valid literal.
        """
        self._ip = self.parse(address)

    @classmethod
    def parse(cls, address):
        """Convert an address, or address literal, to an integer.

        Args:
            address: an address of the same family, or a string, an
                integer or a list/tuple of groups.

        Returns:
            The address as an integer.

        Raises:
            AddressValueError: if address is not a valid literal.
        """
        if isinstance(address, cls):
            return address._ip
        if isinstance(address, str):
            return cls.from_string(address)
        if is_integer(address):
            return cls.from_int(address)
        if isinstance(address, (list, tuple)):
            return cls.from_groups(address)
        raise cls._error(address, 'unsupported literal type %s' %
                         type(address).__name__)

    @classmethod
    def from_int(cls, ip):
        """Validate an address integer.

        Args:
            ip: The address integer

        Returns:
            ip, unchanged

        Raises:
            AddressValueError if ip is out of range for the family.
        """
        if not 0 <= ip <= cls._max_address:
            raise cls._error(ip, 'integer out of range')
        return ip

    @classmethod
    def from_groups(cls, groups):
        """Convert a sequence of groups (octets/hextets) to an integer.

        Args:
            groups: A list or tuple of integers, most significant first

        Returns:
            The address as an integer

        Raises:
            AddressValueError if there are too many/few groups, or any
            group is not an integer in range.
        """
        if len(groups) != cls._group_count:
            raise cls._error(groups, 'expected %d groups' % cls._group_count)
        group_max = (1 << cls._group_bits) - 1
        ip = 0
        for group in groups:
            if not is_integer(group) or not 0 <= group <= group_max:
                raise cls._error(groups, 'invalid group %r' % (group,))
            ip = (ip << cls._group_bits) + group
        return ip

    @classmethod
    def _from_int(cls, ip):
        """Create an address from an integer that is known to be valid."""
        addr = cls.__new__(cls)
        addr._ip = ip
        return addr

    @classmethod
    def _split_groups(cls, ip):
        """Split an address integer into groups, most significant first."""
        bits = cls._group_bits
        mask = (1 << bits) - 1
        return [ip >> shift & mask
                for shift in range(cls._address_len - bits, -1, -bits)]

    def _groups(self):
        """The address groups (octets/hextets), most significant first."""
        return self._split_groups(self._ip)

    def __str__(self):
        return self._to_string(self._ip)

    def __int__(self):
        """The IP address as an integer."""
        return self._ip

    def __reduce__(self):
        return self.__class__, (self._ip,)

    def __hash__(self):
        return hash(self._ip)

    def __eq__(self, other):
        if not isinstance(other, self.__class__):
            return NotImplemented
        return self._ip == other._ip

    def __ne__(self, other):
        if not isinstance(other, self.__class__):
            return NotImplemented
        return self._ip != other._ip

    def __lt__(self, other):
        if not isinstance(other, self.__class__):
            return NotImplemented
        return self._ip < other._ip

    def __le__(self, other):
        if not isinstance(other, self.__class__):
            return NotImplemented
        return self._ip <= other._ip

    def __gt__(self, other):
        if not isinstance(other, self.__class__):
            return NotImplemented
        return self._ip > other._ip

    def __ge__(self, other):
        if not isinstance(other, self.__class__):
            return NotImplemented
        return self._ip >= other._ip

    def to_number(self):
        """The IP address as an integer."""
        return self._ip

    def to_binary_string(self):
        """The address groups as zero-padded binary, e.g. for IPv4:

            '11000000.10101000.00000001.00000001'
        """
        fmt = '0%db' % self._group_bits
        return self._separator.join(format(group, fmt)
                                    for group in self._groups())

    @property
    def packed(self):
        """The binary representation of this address."""
        return self._ip.to_bytes(self._address_len // 8, 'big')

    # Comparisons with another address, or an address literal.  A literal
    # that fails to parse raises the family AddressValueError.

    def equals(self, other):
        return self._ip == self.parse(other)

    def is_greater_than(self, other):
        return self._ip > self.parse(other)

    def is_greater_than_or_equal(self, other):
        return self._ip >= self.parse(other)

    def is_less_than(self, other):
        return self._ip < self.parse(other)

    def is_less_than_or_equal(self, other):
        return self._ip <= self.parse(other)

    def has_next_address(self):
        """Returns True if this is not the highest address."""
        return self._ip < self._max_address

    def next_address(self):
        """The address following this one, or None for the highest."""
        if self._ip >= self._max_address:
            return None
        return self._from_int(self._ip + 1)

    def has_previous_address(self):
        """Returns True if this is not the lowest address."""
        return self._ip > 0

    def previous_address(self):
        """The address preceding this one, or None for the lowest."""
        if self._ip <= 0:
            return None
        return self._from_int(self._ip - 1)

    @property
    def is_multicast(self):
        """Test if the address is reserved for multicast use.

        Returns:
            A boolean, True if the address is multicast.
            See RFC 3171 for details (IPv4) or RFC 2373 2.7 (IPv6).
        """
        return self._constants._multicast_net._contains(self._ip)

    @property
    def is_link_local(self):
        """Test if the address is reserved for link-local.

        Returns:
            A boolean, True if the address is link-local per
            RFC 3927 (IPv4) or RFC 4291 (IPv6).
        """
        return self._constants._linklocal_net._contains(self._ip)

# =============================================================================
# CIDR base class
# =============================================================================

class _BaseCidr(_BaseIP):
    """A base class for a CIDR block, do not instantiate directly.

    A CIDR block is a base address integer, held in '_ip', and a prefix
    length, held in '_prefixlen'.  The base address is kept exactly as
    supplied; it is not aligned to the network boundary.  The netmask,
    hostmask, network address and address count are all derived on
    demand.

    The following attributes must be provided by derived classes:
        _version        The IP version number, 4 or 6
        _address_len    The address length, in bits
        _max_address    The maximum integer value for this address type
        _address_class  The address class of the same family
        _error          The CidrValueError subclass for the family
        _range_error    The CidrRangeError subclass for the family
    """

    __slots__ = ()

    def __init__(self, cidr):
        """Instantiate a new CIDR block.

        Args:
            cidr: A CIDR of the same family, or a CIDR literal: a
                string 'address/prefix', a dict with 'address' and
                'range' keys, or an (address, range) list or tuple.
                The address may be any literal accepted by the
                address class of the family, or an address object.

        Raises:
            CidrValueError: if cidr is not a valid literal.
        """
        self._ip, self._prefixlen = self.parse(cidr)

    @classmethod
    def split_literal(cls, cidr):
        """Decompose a CIDR literal into an address literal and a prefix.

        Args:
            cidr: A CIDR literal, see __init__

        Returns:
            A tuple of the address literal (not yet validated) and the
            prefix length as an integer.

        Raises:
            CidrValueError: if the literal has the wrong shape, the
                address is missing or the prefix is not an integer in
                the range 0 to the address length.
        """
        if isinstance(cidr, cls):
            return cidr._ip, cidr._prefixlen
        if isinstance(cidr, str):
            words = cidr.split('/')
            if len(words) != 2:
                raise cls._error(cidr, 'not in address/prefix form')
            address, prefix = words[0], prefix_from_string(words[1])
        elif isinstance(cidr, dict):
            if 'address' not in cidr or 'range' not in cidr:
                raise cls._error(cidr, 'missing address or range key')
            address, prefix = cidr['address'], cidr['range']
        elif isinstance(cidr, (list, tuple)):
            if len(cidr) != 2:
                raise cls._error(cidr, 'expected (address, range)')
            address, prefix = cidr
        else:
            raise cls._error(cidr, 'unsupported literal type %s' %
                             type(cidr).__name__)
        if address is None:
            raise cls._error(cidr, 'missing address')
        if not is_integer(prefix):
            raise cls._error(cidr, 'prefix is not an integer')
        if not 0 <= prefix <= cls._address_len:
            raise cls._error(cidr, 'prefix out of range')
        return address, prefix

    @classmethod
    def parse(cls, cidr):
        """Convert a CIDR, or CIDR literal, to an integer and prefix.

        Args:
            cidr: A CIDR literal, see __init__

        Returns:
            A tuple of the base address integer and the prefix length.

        Raises:
            CidrValueError: if cidr is not a valid literal.
        """
        address, prefix = cls.split_literal(cidr)
        try:
            ip = cls._address_class.parse(address)
        except AddressValueError:
            raise cls._error(cidr, 'invalid address') from None
        return ip, prefix

    @classmethod
    def _from_parts(cls, ip, prefixlen):
        """Create a CIDR from an address integer and prefix, both valid."""
        net = cls.__new__(cls)
        net._ip = ip
        net._prefixlen = prefixlen
        return net

    @property
    def _size(self):
        """The number of addresses in the block."""
        return 1 << (self._address_len - self._prefixlen)

    @property
    def _netmask(self):
        return self._max_address - self._size + 1

    def _contains(self, ip_int):
        """Check if an IP integer value is in this block.

        Args:
            ip_int: the IP integer to check

        Returns:
            True if ip_int is in this block; otherwise False
        """
        return self._ip <= ip_int < self._ip + self._size

    def __str__(self):
        return f'{self._address_class._to_string(self._ip)}/{self._prefixlen}'

    def __reduce__(self):
        return self.__class__, ((self._ip, self._prefixlen),)

    def __hash__(self):
        return hash((self._ip, self._prefixlen))

    def __eq__(self, other):
        if not isinstance(other, self.__class__):
            return NotImplemented
        return self._ip == other._ip and self._prefixlen == other._prefixlen

    def __ne__(self, other):
        if not isinstance(other, self.__class__):
            return NotImplemented
        return self._ip != other._ip or self._prefixlen != other._prefixlen

    def __iter__(self):
        """Iterate over the IP addresses in this block."""
        return self.addresses()

    def __contains__(self, item):
        """Check if an IP address, or another block, is in this block.

        Args:
            item: the IP address, or CIDR block, to check

        Returns:
            True if item is in this block; otherwise False
        """
        if isinstance(item, self._address_class):
            return self._contains(item._ip)
        if isinstance(item, self.__class__):
            return (self._ip <= item._ip and
                    item._ip + item._size <= self._ip + self._size)
        return False

    def base_address(self):
        """The base address, exactly as it was supplied."""
        return self._address_class._from_int(self._ip)

    def range(self):
        """The prefix length, in bits."""
        return self._prefixlen

    def range_parts(self):
        """Returns a tuple of the base address and the prefix length."""
        return self.base_address(), self._prefixlen

    def netmask(self):
        """Returns the network mask for the block, as an IP address."""
        return self._address_class._from_int(self._netmask)

    def hostmask(self):
        """Returns the host mask for the block, as an IP address."""
        return self._address_class._from_int(self._size - 1)

    def network(self):
        """The base address with the host bits cleared."""
        return self._address_class._from_int(self._ip & self._netmask)

    def network_cidr(self):
        """The network aligned CIDR block, with the same prefix length."""
        return self._from_parts(self._ip & self._netmask, self._prefixlen)

    def address_count(self):
        """The number of addresses in this block."""
        return self._size

    def get_first_usable_address(self):
        """The first host address, the one after the base address.

        Returns:
            An IP address, or None if the block is a single address.
        """
        if self._prefixlen == self._address_len:
            return None
        ip = self._ip + 1
        if ip > self._max_address:
            return None
        return self._address_class._from_int(ip)

    def get_last_usable_address(self):
        """The last host address, the one before the last in the block.

        Returns:
            An IP address, or None if the block is a single address.
        """
        if self._prefixlen == self._address_len:
            return None
        ip = self._ip + self._size - 2
        if ip > self._max_address:
            return None
        return self._address_class._from_int(ip)

    def addresses(self, limit=None):
        """Generate the IP addresses in this block, in ascending order.

        Each call returns a new, independent generator.

        Args:
            limit: The maximum number of addresses to generate, or None
                to generate every address in the block.

        Yields:
            IP address objects, from the base address upwards.

        Raises:
            TypeError: if limit is not an integer or None.
        """
        if limit is not None and not is_integer(limit):
            raise TypeError('limit must be an integer or None: %r' % (limit,))
        count = self._size
        if limit is not None and limit < count:
            count = max(limit, 0)
        # an unaligned base near the top of the space stops at the end
        stop = min(self._ip + count, self._max_address + 1)
        from_int = self._address_class._from_int
        for ip in range(self._ip, stop):
            yield from_int(ip)

    def equals(self, other):
        """Check if another CIDR, or CIDR literal, is the same block.

        The base addresses are compared as given, so '10.0.0.1/24' does
        not equal '10.0.0.0/24'.

        Raises:
            CidrValueError: if other is not a valid CIDR literal.
        """
        ip, prefixlen = self.parse(other)
        return self._ip == ip and self._prefixlen == prefixlen

    def includes(self, address):
        """Check if an IP address is in the range [base, base + count).

        Args:
            address: An IP address, or address literal

        Raises:
            AddressValueError: if address is not a valid literal.
        """
        return self._contains(self._address_class.parse(address))

    def overlaps(self, other):
        """Check if another CIDR block shares any address with this one.

        Args:
            other: A CIDR block, or CIDR literal

        Raises:
            CidrValueError: if other is not a valid CIDR literal.
        """
        ip, prefixlen = self.parse(other)
        size = 1 << (self._address_len - prefixlen)
        return self._ip < ip + size and ip < self._ip + self._size

    def has_next_cidr(self):
        """Returns True if the whole of the next block fits in the space."""
        size = self._size
        return self._ip + size <= self._max_address - (size - 1)

    def next_cidr(self):
        """The adjacent block after this one, with the same prefix.

        Returns:
            A CIDR block, or None at the top of the address space.
        """
        if not self.has_next_cidr():
            return None
        return self._from_parts(self._ip + self._size, self._prefixlen)

    def has_previous_cidr(self):
        """Returns True if the whole of the previous block fits."""
        return self._ip - self._size >= 0

    def previous_cidr(self):
        """The adjacent block before this one, with the same prefix.

        Returns:
            A CIDR block, or None at the bottom of the address space.
        """
        if not self.has_previous_cidr():
            return None
        return self._from_parts(self._ip - self._size, self._prefixlen)

    def _check_prefix(self, prefixlen):
        """Check a new prefix length is valid for splitting this block.

        Raises:
            TypeError: if prefixlen is not an integer.
            CidrRangeError: if prefixlen is smaller than the prefix of
                this block, or larger than the address length.
        """
        if not is_integer(prefixlen):
            raise TypeError('prefix length must be an integer: %r' %
                            (prefixlen,))
        if not self._prefixlen <= prefixlen <= self._address_len:
            raise self._range_error(
                    'prefix length %d must be between the current prefix '
                    'length %d and %d' % (prefixlen, self._prefixlen,
                                          self._address_len))

    def subnet(self, new_prefix):
        """Split this block into equal, contiguous subnets.

        For example, '192.168.0.0/24' split to /26 gives:
            ['192.168.0.0/26', '192.168.0.64/26',
             '192.168.0.128/26', '192.168.0.192/26']

        Args:
            new_prefix: The prefix length of the subnets, which must be
                between the prefix of this block and the address length.

        Returns:
            A list of 2**(new_prefix - prefix) CIDR blocks, in ascending
            order from the base address.

        Raises:
            TypeError: if new_prefix is not an integer.
            CidrRangeError: if new_prefix is out of range, or the block
                extends past the end of the address space.
        """
        self._check_prefix(new_prefix)
        end = self._ip + self._size
        if end - 1 > self._max_address:
            raise self._range_error('%s extends past the end of the address '
                                    'space' % (self,))
        size = 1 << (self._address_len - new_prefix)
        _logger.debug('splitting %s into %d /%d subnets',
                      self, self._size // size, new_prefix)
        return [self._from_parts(ip, new_prefix)
                for ip in range(self._ip, end, size)]

    def subnet_by(self, prefixes):
        """Allocate consecutive subnets of the given prefix lengths.

        Each subnet starts where the previous one ends, the first at the
        base address.  Subnets are allocated in the order given, with no
        reordering to make them fit.

        For example, '192.168.0.0/24' by [25, 26, 27, 27] gives:
            ['192.168.0.0/25', '192.168.0.128/26',
             '192.168.0.192/27', '192.168.0.224/27']

        Args:
            prefixes: An iterable of prefix lengths, each between the
                prefix of this block and the address length.

        Returns:
            A list of CIDR blocks, one per prefix.  Nothing is returned
            if any prefix is rejected.

        Raises:
            TypeError: if a prefix is not an integer.
            CidrRangeError: if a prefix is out of range, or a subnet
                would extend past the end of this block.
        """
        subnets = []
        ip = self._ip
        end = min(self._ip + self._size, self._max_address + 1)
        for prefixlen in prefixes:
            self._check_prefix(prefixlen)
            size = 1 << (self._address_len - prefixlen)
            if ip + size > end:
                _logger.debug('subnet /%d rejected, %d addresses left in %s',
                              prefixlen, end - ip, self)
                raise self._range_error(
                        'subnet /%d does not fit in the %d addresses '
                        'remaining in %s' % (prefixlen, end - ip, self))
            subnets.append(self._from_parts(ip, prefixlen))
            ip += size
        _logger.debug('allocated %d subnets from %s', len(subnets), self)
        return subnets
