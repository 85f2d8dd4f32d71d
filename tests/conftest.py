"""
Fixtures used in the tests
"""
from random import Random

import pytest

from cidrblock import ipv4, ipv6


@pytest.fixture()
def rng():
    # Seeded, so the property tests are repeatable
    return Random(20240518)


@pytest.fixture()
def private_v4():
    return ipv4.cidr("192.168.0.0/24")


@pytest.fixture()
def documentation_v6():
    return ipv6.cidr("2001:db8::/32")
