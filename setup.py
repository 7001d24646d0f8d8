from collections import defaultdict
from setuptools import find_packages, setup

# PEP0440 compatible formatted version, see:
# https://www.python.org/dev/peps/pep-0440/
#
# release markers:
#   X.Y
#   X.Y.Z   # For bugfix releases
#
# pre-release markers:
#   X.YaN   # Alpha release
#   X.YbN   # Beta release
#   X.YrcN  # Release Candidate
#   X.Y     # Final release


def parse_requirements_file(path, allowed_extras: set = None, include_all_extra: bool = True):
    requirements = []
    extras = defaultdict(list)
    with open(path) as requirements_file:
        for line in requirements_file:
            line = line.strip()
            if line.startswith("#") or len(line) <= 0:
                continue
            req, *needed_by = line.split("# needed by:")
            req = req.strip()
            if needed_by:
                for extra in needed_by[0].strip().split(","):
                    extra = extra.strip()
                    if allowed_extras is not None and extra not in allowed_extras:
                        raise ValueError(f"invalid extra '{extra}' in {path}")
                    extras[extra].append(req)
                if include_all_extra and req not in extras["all"]:
                    extras["all"].append(req)
            else:
                requirements.append(req)
    return requirements, extras


# Load requirements.
install_requirements, extras = parse_requirements_file("requirements.txt", allowed_extras=set())
dev_requirements, _ = parse_requirements_file(
    "dev-requirements.txt", allowed_extras=set(), include_all_extra=False
)
extras["dev"] = dev_requirements

# version.py defines the VERSION and VERSION_SHORT variables.
# We use exec here so we don't import amrgen whilst setting up.
VERSION = {}  # type: ignore
with open("amrgen/version.py", "r") as version_file:
    exec(version_file.read(), VERSION)

# Packaging requires a PEP 440 version, so a "-suffix" becomes a local label.
PACKAGE_VERSION = VERSION["VERSION"].replace("-", "+", 1)

setup(
    name="amrgen",
    version=PACKAGE_VERSION,
    description="Transition-based generation of English sentences from AMR graphs.",
    long_description=open("README.md", encoding="utf-8").read(),
    long_description_content_type="text/markdown",
    classifiers=[
        "Intended Audience :: Science/Research",
        "Development Status :: 3 - Alpha",
        "Programming Language :: Python :: 3",
        "Topic :: Scientific/Engineering :: Artificial Intelligence",
        "Topic :: Text Processing :: Linguistic",
    ],
    keywords="amr natural language generation semantic graphs",
    packages=find_packages(
        exclude=[
            "*.tests",
            "*.tests.*",
            "tests.*",
            "tests",
            "test_fixtures",
            "test_fixtures.*",
        ]
    ),
    install_requires=install_requirements,
    extras_require=extras,
    include_package_data=True,
    python_requires=">=3.7.1",
    zip_safe=False,
)
