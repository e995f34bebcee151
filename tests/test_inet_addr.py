import pytest

from tinyreactor.inet_addr import InetAddr


def test_default_is_wildcard_zero():
    addr = InetAddr()
    assert addr.to_ip() == "0.0.0.0"
    assert addr.to_port() == 0
    assert addr.to_ip_port() == "0.0.0.0:0"


def test_port_only_binds_any():
    addr = InetAddr(8888)
    assert addr.to_ip() == "0.0.0.0"
    assert addr.to_port() == 8888


def test_ip_port_format():
    addr = InetAddr(8888, "127.0.0.1")
    assert addr.to_ip_port() == "127.0.0.1:8888"
    assert str(addr) == addr.to_ip_port()


def test_sockaddr_round_trip():
    addr = InetAddr(10000, "192.168.1.20")
    assert InetAddr.from_sockaddr(addr.to_sockaddr()) == addr
    assert addr.to_sockaddr() == ("192.168.1.20", 10000)


def test_from_sockaddr_ignores_extra_fields():
    addr = InetAddr.from_sockaddr(("10.0.0.1", 80, 0, 0))
    assert addr == InetAddr(80, "10.0.0.1")


def test_none_ip_means_any():
    assert InetAddr(80, None) == InetAddr(80)


@pytest.mark.parametrize("ip", ["999.1.1.1", "not-an-ip", "::1"])
def test_invalid_ip_rejected(ip):
    with pytest.raises(ValueError):
        InetAddr(80, ip)


@pytest.mark.parametrize("port", [-1, 65536])
def test_invalid_port_rejected(port):
    with pytest.raises(ValueError):
        InetAddr(port)


def test_immutable():
    addr = InetAddr(1)
    with pytest.raises(AttributeError):
        addr.port = 2  # type: ignore[misc]
    assert addr.to_port() == 1
    assert addr.to_ip_port() == "0.0.0.0:1"