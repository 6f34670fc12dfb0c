import os

_MAJOR = "0"
_MINOR = "1"
# On main the patch should be one ahead of the last released build.
_PATCH = "0"
# For pre-release and build metadata. In an official release this must be the
# empty string. See https://semver.org/#is-v123-a-semantic-version for the semantics.
_SUFFIX = os.environ.get("COREFSCORE_VERSION_SUFFIX", "")

VERSION_SHORT = "{0}.{1}".format(_MAJOR, _MINOR)
VERSION = "{0}.{1}.{2}{3}".format(_MAJOR, _MINOR, _PATCH, _SUFFIX)
