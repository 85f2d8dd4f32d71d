"""
Tests for IPv4 CIDR validation and the Ipv4Cidr class
"""
import logging
import pickle

import pytest

from cidrblock import ipv4
from cidrblock.ipv4 import Ipv4Cidr, Ipv4CidrRangeError, Ipv4CidrValueError


def strs(values):
    return [str(value) for value in values]


# --- Construction and validation --- #

@pytest.mark.parametrize("literal", [
    "192.168.0.0/24",
    "0.0.0.0/0",
    "255.255.255.255/32",
    "10.0.0.1/8",
    {"address": "10.0.0.0", "range": 8},
    {"address": [10, 0, 0, 0], "range": 8},
    [[172, 16, 0, 0], 12],
    ("172.16.0.0", 12),
    (167772160, 8),
    (ipv4.address("10.0.0.0"), 8),
])
def test_valid_cidrs(literal):
    assert ipv4.is_valid_cidr(literal)
    ipv4.cidr(literal)


@pytest.mark.parametrize("literal", [
    None,
    "",
    "192.168.0.0",
    "192.168.0.0/33",
    "192.168.0.0/-1",
    "192.168.0.0/" + "1" * 5000,
    "192.168.0.0/-" + "1" * 5000,
    "192.168.0.0/",
    "192.168.0.0/abc",
    "192.168.0.0/24/1",
    "invalid/24",
    "256.0.0.0/8",
    {"address": "10.0.0.0"},
    {"range": 8},
    {"address": None, "range": 8},
    {"address": "10.0.0.0", "range": "8"},
    {"address": "10.0.0.0", "range": 8.5},
    {"address": "10.0.0.0", "range": True},
    [None, 8],
    ["10.0.0.0"],
    ["10.0.0.0", 8, 1],
    ["10.0.0.0", 33],
    [[10, 0, 0], 8],
    24,
    object(),
])
def test_invalid_cidrs(literal):
    assert not ipv4.is_valid_cidr(literal)
    with pytest.raises(Ipv4CidrValueError) as excinfo:
        ipv4.cidr(literal)
    assert excinfo.value.literal is literal


def test_leading_integer_prefix():
    # Only the leading integer of a string prefix is used
    assert ipv4.is_valid_cidr("192.168.0.0/24.5")
    assert ipv4.cidr("192.168.0.0/24.5").range() == 24
    assert ipv4.cidr("192.168.0.0/ 16abc").range() == 16
    assert ipv4.cidr("192.168.0.0/+8").range() == 8


def test_prefix_leading_zeros():
    assert ipv4.cidr("192.168.0.0/0000024").range() == 24
    assert ipv4.cidr("192.168.0.0/" + "0" * 5000 + "16").range() == 16
    assert ipv4.cidr("0.0.0.0/000").range() == 0


def test_very_long_prefix_is_invalid():
    literal = "10.0.0.0/" + "1" * 5000
    assert ipv4.is_valid_cidr(literal) is False
    assert ipv4.is_valid_cidr(literal + ".5") is False
    with pytest.raises(Ipv4CidrValueError, match="prefix out of range"):
        ipv4.cidr(literal)


def test_base_address_is_not_aligned():
    net = ipv4.cidr("10.0.0.77/24")
    assert str(net.base_address()) == "10.0.0.77"
    assert str(net) == "10.0.0.77/24"
    assert str(net.network()) == "10.0.0.0"
    assert str(net.network_cidr()) == "10.0.0.0/24"
    assert net.network_cidr().range() == 24


def test_copy_from_cidr():
    net = ipv4.cidr("10.0.0.0/8")
    assert Ipv4Cidr(net) == net
    assert Ipv4Cidr(net) is not net


def test_formats():
    net = ipv4.cidr({"address": "10.0.0.0", "range": 8})
    assert str(net) == "10.0.0.0/8"
    assert repr(net) == "Ipv4Cidr('10.0.0.0/8')"
    assert net.exploded == "10.0.0.0/8"
    base, prefix = net.range_parts()
    assert str(base) == "10.0.0.0"
    assert prefix == 8
    assert pickle.loads(pickle.dumps(net)) == net


# --- Masks and counts --- #

@pytest.mark.parametrize("literal, netmask, hostmask, count", [
    ("192.168.0.0/24", "255.255.255.0", "0.0.0.255", 256),
    ("10.0.0.0/8", "255.0.0.0", "0.255.255.255", 2**24),
    ("172.16.0.0/12", "255.240.0.0", "0.15.255.255", 2**20),
    ("0.0.0.0/0", "0.0.0.0", "255.255.255.255", 2**32),
    ("1.2.3.4/32", "255.255.255.255", "0.0.0.0", 1),
])
def test_masks(literal, netmask, hostmask, count):
    net = ipv4.cidr(literal)
    assert str(net.netmask()) == netmask
    assert str(net.hostmask()) == hostmask
    assert net.address_count() == count


def test_usable_addresses(private_v4):
    assert private_v4.address_count() == 256
    assert str(private_v4.get_first_usable_address()) == "192.168.0.1"
    assert str(private_v4.get_last_usable_address()) == "192.168.0.254"


def test_single_address_has_no_usable_range():
    net = ipv4.cidr("10.0.0.1/32")
    assert net.get_first_usable_address() is None
    assert net.get_last_usable_address() is None


def test_usable_addresses_past_the_top_of_the_space():
    net = ipv4.cidr("255.255.255.255/24")
    assert net.get_first_usable_address() is None
    assert net.get_last_usable_address() is None


# --- Iteration --- #

def test_addresses():
    net = ipv4.cidr("192.168.1.0/30")
    assert strs(net.addresses()) == [
        "192.168.1.0", "192.168.1.1", "192.168.1.2", "192.168.1.3"]
    assert strs(net) == strs(net.addresses())


def test_addresses_limit():
    net = ipv4.cidr("10.0.0.0/8")
    assert strs(net.addresses(3)) == ["10.0.0.0", "10.0.0.1", "10.0.0.2"]
    assert list(net.addresses(0)) == []
    assert len(list(ipv4.cidr("10.0.0.0/30").addresses(100))) == 4


@pytest.mark.parametrize("limit", [2.5, "3", True])
def test_addresses_limit_must_be_an_integer(limit):
    net = ipv4.cidr("10.0.0.0/8")
    with pytest.raises(TypeError, match="limit must be an integer"):
        list(net.addresses(limit))


def test_addresses_are_restartable():
    net = ipv4.cidr("10.0.0.0/29")
    first, second = net.addresses(), net.addresses()
    assert str(next(first)) == "10.0.0.0"
    assert str(next(first)) == "10.0.0.1"
    assert str(next(second)) == "10.0.0.0"
    assert len(list(net.addresses())) == 8


def test_addresses_stop_at_the_top_of_the_space():
    net = ipv4.cidr("255.255.255.254/24")
    assert strs(net.addresses()) == ["255.255.255.254", "255.255.255.255"]


# --- Equality, containment and overlap --- #

def test_equals():
    net = ipv4.cidr("10.0.0.0/8")
    assert net.equals("10.0.0.0/8")
    assert net.equals(("10.0.0.0", 8))
    assert net.equals(ipv4.cidr({"address": 167772160, "range": 8}))
    assert not net.equals("10.0.0.0/9")
    # no alignment before comparing
    assert not ipv4.cidr("10.0.0.1/8").equals(net)
    assert net == ipv4.cidr("10.0.0.0/8")
    assert net != ipv4.cidr("10.0.0.0/9")
    assert hash(net) == hash(ipv4.cidr([[10, 0, 0, 0], 8]))


def test_equals_invalid_literal_raises():
    with pytest.raises(Ipv4CidrValueError):
        ipv4.cidr("10.0.0.0/8").equals("10.0.0.0/64")


def test_includes(private_v4):
    assert private_v4.includes(ipv4.address("192.168.0.100"))
    assert private_v4.includes("192.168.0.0")
    assert private_v4.includes("192.168.0.255")
    assert not private_v4.includes("192.168.1.0")
    assert not private_v4.includes("192.167.255.255")
    assert ipv4.address("192.168.0.7") in private_v4
    assert "192.168.0.7" not in private_v4


def test_includes_uses_the_raw_base():
    net = ipv4.cidr("10.0.0.128/24")
    assert not net.includes("10.0.0.0")
    assert net.includes("10.0.1.127")
    assert not net.includes("10.0.1.128")


def test_contains_cidr():
    net = ipv4.cidr("10.0.0.0/8")
    assert ipv4.cidr("10.1.0.0/16") in net
    assert ipv4.cidr("10.0.0.0/8") in net
    assert ipv4.cidr("10.0.0.0/7") not in net


def test_overlaps(private_v4):
    assert private_v4.overlaps("192.168.0.0/25")
    assert private_v4.overlaps("192.168.0.128/25")
    assert private_v4.overlaps("192.168.0.0/16")
    assert not private_v4.overlaps("10.0.0.0/8")
    assert not private_v4.overlaps("192.168.1.0/24")
    assert not private_v4.overlaps(ipv4.cidr("192.167.255.0/24"))


# --- Navigation --- #

def test_next_and_previous(private_v4):
    assert str(private_v4.next_cidr()) == "192.168.1.0/24"
    assert str(private_v4.previous_cidr()) == "192.167.255.0/24"
    assert private_v4.has_next_cidr()
    assert private_v4.has_previous_cidr()


def test_next_cidr_at_the_top():
    net = ipv4.cidr("255.255.255.0/24")
    assert not net.has_next_cidr()
    assert net.next_cidr() is None
    assert str(ipv4.cidr("255.255.254.0/24").next_cidr()) == "255.255.255.0/24"


def test_next_cidr_must_fit_completely():
    net = ipv4.cidr("255.255.254.1/24")
    assert not net.has_next_cidr()
    assert net.next_cidr() is None


def test_previous_cidr_at_the_bottom():
    net = ipv4.cidr("0.0.0.0/24")
    assert not net.has_previous_cidr()
    assert net.previous_cidr() is None
    assert not ipv4.cidr("0.0.0.255/24").has_previous_cidr()
    assert str(ipv4.cidr("0.0.1.0/24").previous_cidr()) == "0.0.0.0/24"


def test_whole_space_has_no_neighbours():
    net = ipv4.cidr("0.0.0.0/0")
    assert net.next_cidr() is None
    assert net.previous_cidr() is None


# --- Subnetting --- #

def test_subnet(private_v4):
    assert strs(private_v4.subnet(26)) == [
        "192.168.0.0/26", "192.168.0.64/26",
        "192.168.0.128/26", "192.168.0.192/26"]
    assert strs(private_v4.subnet(24)) == ["192.168.0.0/24"]
    assert len(private_v4.subnet(32)) == 256


@pytest.mark.parametrize("prefix", [23, 33, -1])
def test_subnet_out_of_range(private_v4, prefix):
    with pytest.raises(Ipv4CidrRangeError):
        private_v4.subnet(prefix)


def test_subnet_requires_an_integer(private_v4):
    with pytest.raises(TypeError):
        private_v4.subnet("26")


def test_subnet_past_the_top_of_the_space():
    with pytest.raises(Ipv4CidrRangeError):
        ipv4.cidr("255.255.255.255/24").subnet(25)


def test_subnet_by(private_v4):
    assert strs(private_v4.subnet_by([25, 26, 27, 27])) == [
        "192.168.0.0/25", "192.168.0.128/26",
        "192.168.0.192/27", "192.168.0.224/27"]
    assert strs(private_v4.subnet_by([])) == []
    assert strs(private_v4.subnet_by(iter([30]))) == ["192.168.0.0/30"]


def test_subnet_by_does_not_reorder(private_v4):
    # /26 then /25 leaves the /25 unaligned at .64
    assert strs(private_v4.subnet_by([26, 25])) == [
        "192.168.0.0/26", "192.168.0.64/25"]


def test_subnet_by_overflow(private_v4):
    with pytest.raises(Ipv4CidrRangeError, match="does not fit"):
        private_v4.subnet_by([25, 25, 32])


@pytest.mark.parametrize("prefixes", [[23], [25, 33]])
def test_subnet_by_out_of_range(private_v4, prefixes):
    with pytest.raises(Ipv4CidrRangeError):
        private_v4.subnet_by(prefixes)


def test_subnet_logging(private_v4, caplog):
    with caplog.at_level(logging.DEBUG, logger="cidrblock"):
        private_v4.subnet(25)
    assert "192.168.0.0/24" in caplog.text
