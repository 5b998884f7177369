import setuptools

setuptools.setup(
    name="delphixci",
    version="0.1.0",
    description="Build pipeline steps for Delphix engines and Data Control Tower",
    packages=setuptools.find_packages(include=["delphixci", "delphixci.*"]),
    entry_points={
        "console_scripts": [
            "delphixci-bookmark = delphixci.cli.bookmark:main",
            "delphixci-container = delphixci.cli.container:main",
            "delphixci-vdb-provision = delphixci.cli.vdb_provision:main",
            "delphixci-vdb-delete = delphixci.cli.vdb_delete:main",
            "delphixci-list = delphixci.cli.list_resources:main",
        ]
    },
    install_requires=[
        # for talking to the engine and to DCT
        "requests>=2.27,<3",
        # for logging (build log included)
        "structlog>=23.1",
        # for the command line tools
        "typed-argument-parser==1.*",
        # for parsing engine/DCT payloads and the config file
        "pydantic==2.*",
        # For the config file
        "PyYAML==6.*",
        # For the config file
        # (for accessing XDG_CONFIG_HOME)
        "xdg==6.*",
    ],
    extras_require={
        "test": [
            "pytest>=7",
            "pyfakefs>=5",
        ],
    },
    python_requires=">=3.10",
)
