"""ARA notification gateway package initializer.

The package re-exports nothing; submodules are imported explicitly by the
application entry point and the tests.
"""
