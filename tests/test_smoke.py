import server


EXPECTED_EXPORTS = (
    "create_app",
    "health_payload",
    "build_endpoint_resolver",
    "main",
)


def test_import_server() -> None:
    for name in EXPECTED_EXPORTS:
        assert hasattr(server, name)
