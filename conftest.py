pytest_plugins = ["fieldshift.testing.fixtures"]
