pytest_plugins = [
    "tests.fixtures.app_fixtures",
]
