import pytest

from modproxy.semver.semver import UpdateLevel, compareVersion, parseVersionTag


@pytest.mark.parametrize(
    "a, b, expected",
    [
        ("v2.0.0", "v1.9.9", UpdateLevel.MAJOR),
        ("v1.3.0", "v1.2.9", UpdateLevel.MINOR),
        ("v1.2.4", "v1.2.3", UpdateLevel.PATCH),
        ("v1.2.3-beta.2", "v1.2.3-beta.1", UpdateLevel.DEV),
        ("v1.2.3", "v1.2.3", UpdateLevel.NONE),
        ("v1.2.3-alpha.1", "v1.3.0", UpdateLevel.NONE),
        ("v1.9.9", "v2.0.0", UpdateLevel.NONE),
        ("v10.0.0", "v9.0.0", UpdateLevel.MAJOR),   # numeric, not lexical
        ("v1.10.0", "v1.9.0", UpdateLevel.MINOR),
    ],
)
def test_compareVersion_ranks(a, b, expected):
    result = compareVersion(a, b)
    assert not isinstance(result, bool)
    assert result == expected


@pytest.mark.parametrize(
    "a, b, expected",
    [
        ("v1.2.3-rc.1", "v1.2.3-beta.9", UpdateLevel.DEV),
        ("v1.2.3-beta.1", "v1.2.3-alpha.5", UpdateLevel.DEV),
        ("v1.2.3-alpha.5", "v1.2.3-beta.1", UpdateLevel.NONE),
        ("v1.2.3-beta.1", "v1.2.3-beta.2", UpdateLevel.NONE),
        ("v1.2.3-beta.2", "v1.2.3-beta.2", UpdateLevel.NONE),
        ("v1.2.3-alpha.1", "v1.2.3-nightly.7", UpdateLevel.DEV),   # unknown label ranks lowest
        ("v1.2.3-nightly.9", "v1.2.3-nightly.1", UpdateLevel.DEV),
        ("v1.2.3-beta", "v1.2.3-beta.3", UpdateLevel.NONE),        # missing index decides nothing
    ],
)
def test_compareVersion_prereleases(a, b, expected):
    assert compareVersion(a, b) == expected


def test_release_over_its_prerelease_is_boolean_true():
    result = compareVersion("v1.2.3", "v1.2.3-rc.1")
    assert result is True


def test_prerelease_under_its_release_is_boolean_false():
    result = compareVersion("v1.2.3-rc.1", "v1.2.3")
    assert result is False


def test_numeric_difference_still_wins_over_prerelease_flags():
    assert compareVersion("v1.2.4-alpha.1", "v1.2.3") == UpdateLevel.PATCH


def test_parseVersionTag_structure():
    tag = parseVersionTag("v1.2.3-beta.2")
    assert tag.core == (1, 2, 3)
    assert tag.prerelease == "beta.2"
    assert tag.isPrerelease
    assert tag.prereleaseKey == (2, 2)
    assert str(tag) == "v1.2.3-beta.2"


def test_parseVersionTag_lenient_components():
    tag = parseVersionTag("v1.2")
    assert tag.core == (1, 2, None)
    assert not tag.isPrerelease
    assert compareVersion("v1.2", "v1.2.7") == UpdateLevel.NONE


def test_parseVersionTag_without_v_prefix():
    assert parseVersionTag("3.0.1").core == (3, 0, 1)


def test_parseVersionTag_rejects_non_strings():
    with pytest.raises(TypeError):
        parseVersionTag(None)
