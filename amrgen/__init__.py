from amrgen.version import VERSION as __version__  # noqa
