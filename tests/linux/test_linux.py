import textwrap

from surveyor.linux import LinuxRelease, identify_release, parse_os_release
from surveyor.source import DirectoryResolver

DEBIAN_OS_RELEASE = textwrap.dedent(
    """\
    PRETTY_NAME="Debian GNU/Linux 12 (bookworm)"
    NAME="Debian GNU/Linux"
    VERSION_ID="12"
    VERSION="12 (bookworm)"
    VERSION_CODENAME=bookworm
    ID=debian
    HOME_URL="https://www.debian.org/"
    SUPPORT_URL="https://www.debian.org/support"
    BUG_REPORT_URL="https://bugs.debian.org/"
    """
)


def test_parse_os_release():
    values = parse_os_release(
        "# comment\n\nID=ubuntu\nID_LIKE=debian\nNAME='Ubuntu'\nPRETTY_NAME=\"Ubuntu 22.04.3 LTS\"\nnot a pair\n"
    )
    assert values == {
        "ID": "ubuntu",
        "ID_LIKE": "debian",
        "NAME": "Ubuntu",
        "PRETTY_NAME": "Ubuntu 22.04.3 LTS",
    }


def test_parse_os_release_unbalanced_quote():
    assert parse_os_release('NAME="Broken\n') == {"NAME": "Broken"}


def test_identify_from_os_release(tmp_path):
    (tmp_path / "etc").mkdir()
    (tmp_path / "etc" / "os-release").write_text(DEBIAN_OS_RELEASE)
    release = identify_release(DirectoryResolver(str(tmp_path)))
    assert release.id == "debian"
    assert release.version_id == "12"
    assert release.version_codename == "bookworm"
    assert release.pretty_name == "Debian GNU/Linux 12 (bookworm)"
    assert release.id_like == []
    assert release.distro_qualifier() == "debian-12"


def test_identify_from_usr_lib_os_release(tmp_path):
    (tmp_path / "usr" / "lib").mkdir(parents=True)
    (tmp_path / "usr" / "lib" / "os-release").write_text("ID=fedora\nVERSION_ID=39\nID_LIKE=\"rhel centos\"\n")
    release = identify_release(DirectoryResolver(str(tmp_path)))
    assert (release.id, release.version_id) == ("fedora", "39")
    assert release.id_like == ["rhel", "centos"]


def test_identify_from_version_stamps(tmp_path):
    (tmp_path / "etc").mkdir()
    (tmp_path / "etc" / "alpine-release").write_text("3.19.1\n")
    assert identify_release(DirectoryResolver(str(tmp_path))) == LinuxRelease(
        id="alpine", name="Alpine Linux", version_id="3.19.1"
    )

    (tmp_path / "etc" / "alpine-release").unlink()
    (tmp_path / "etc" / "debian_version").write_text("12.4\n")
    release = identify_release(DirectoryResolver(str(tmp_path)))
    assert (release.id, release.version_id) == ("debian", "12.4")


def test_not_a_distribution(tmp_path):
    (tmp_path / "README").write_text("hello")
    assert identify_release(DirectoryResolver(str(tmp_path))) is None


def test_distro_qualifier():
    assert LinuxRelease().distro_qualifier() == ""
    assert LinuxRelease(id="alpine").distro_qualifier() == "alpine"
    assert LinuxRelease(id="alpine", version_id="3.19").distro_qualifier() == "alpine-3.19"
