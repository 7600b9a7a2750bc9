def pytest_configure(config):
    config.addinivalue_line("markers", "codec: byte buffer conversion tests")
    config.addinivalue_line("markers", "client: tests of the access engine and transport")
    config.addinivalue_line("markers", "cli: command line tests")
