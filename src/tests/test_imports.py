"""Basic import tests to verify all dependencies are installed correctly."""


def test_runtime_imports():
    """Test that runtime libraries can be imported."""
    import structlog
    import yaml

    assert hasattr(structlog, "get_logger")
    assert hasattr(yaml, "safe_load")


def test_fixture_library_imports():
    """Test that dnspython, used to build wire fixtures, can be imported."""
    import dns.message
    import dns.rdata

    assert hasattr(dns.message, "make_response")
    assert hasattr(dns.rdata, "from_text")


def test_package_exports():
    """Test the public names of the core package."""
    from dns_decoder import __version__
    from dns_decoder.core import (
        DatagramReader,
        DnsResponseMessage,
        RecordDesyncError,
        RecordFactory,
        ResourceRecordType,
    )

    assert __version__
    assert ResourceRecordType.CAA == 257
    assert issubclass(RecordDesyncError, Exception)
    assert callable(DatagramReader)
    assert callable(RecordFactory)
    assert callable(DnsResponseMessage.from_bytes)
