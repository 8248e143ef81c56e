from pytest import mark, raises

from fedora_alchemy import *

PROFILE_XML = """\
<?xml version="1.0" encoding="UTF-8"?>
<datastreamProfile xmlns="http://www.fedora.info/definitions/1/0/management/"
    xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance"
    pid="demo:1" dsID="DC">
  <dsLabel>Dublin Core Record</dsLabel>
  <dsVersionID>DC1.0</dsVersionID>
  <dsCreateDate>2011-01-01T00:00:00.000Z</dsCreateDate>
  <dsState>A</dsState>
  <dsMIME>text/xml</dsMIME>
  <dsFormatURI>http://www.openarchives.org/OAI/2.0/oai_dc/</dsFormatURI>
  <dsControlGroup>X</dsControlGroup>
  <dsSize>491</dsSize>
  <dsVersionable>true</dsVersionable>
  <dsAltID>alt1</dsAltID>
  <dsAltID>alt2</dsAltID>
  <dsLocation>demo:1+DC+DC1.0</dsLocation>
  <dsLocationType></dsLocationType>
  <dsChecksumType>DISABLED</dsChecksumType>
  <dsChecksum>none</dsChecksum>
</datastreamProfile>
"""

PROFILE_XML_NO_NS = """\
<datastreamProfile pid="demo:1" dsID="DC">
  <dsLabel>Dublin Core Record</dsLabel>
  <dsAltID>alt1</dsAltID>
  <dsAltID>alt2</dsAltID>
</datastreamProfile>
"""


def test_parse():
    profile = parse_profile(PROFILE_XML)

    assert profile["dsLabel"] == "Dublin Core Record"
    assert profile["dsControlGroup"] == "X"
    assert profile["dsVersionable"] == "true"
    assert profile["dsLocationType"] == ""

    # repeated fields collected in order
    assert profile["dsAltID"] == ["alt1", "alt2"]

    assert len(profile) == 14


def test_parse_no_namespace():
    profile = parse_profile(PROFILE_XML_NO_NS)

    assert profile == {
        "dsLabel": "Dublin Core Record",
        "dsAltID": ["alt1", "alt2"],
    }


def test_parse_bytes():
    profile = parse_profile(PROFILE_XML.encode())
    assert profile["dsMIME"] == "text/xml"


def test_parse_bytes_encoding():
    """
    Bytes are decoded according to the document's XML declaration.
    """
    document = (
        '<?xml version="1.0" encoding="ISO-8859-1"?>'
        "<datastreamProfile><dsLabel>Café</dsLabel></datastreamProfile>"
    ).encode("latin-1")

    assert parse_profile(document) == {"dsLabel": "Café"}


def test_parse_bytes_undecodable():
    document = (
        b'<?xml version="1.0" encoding="UTF-8"?>'
        b"<datastreamProfile><dsLabel>\xff\xfe</dsLabel></datastreamProfile>"
    )

    with raises(ProfileParseError):
        parse_profile(document)


def test_parse_malformed():
    with raises(ProfileParseError):
        parse_profile("<datastreamProfile><dsLabel>")

    with raises(ProfileParseError):
        parse_profile("Datastream not found")

    # well-formed, but not a profile
    with raises(ProfileParseError):
        parse_profile('<html xmlns="http://www.w3.org/1999/xhtml"></html>')


@mark.profile({"dsLabel": "Foo", "dsAltID": ["a", "b"]}, namespaced=False)
def test_profile_no_namespace(ds: Datastream):
    assert not ds.new
    assert ds.profile == {"dsLabel": "Foo", "dsAltID": ["a", "b"]}
    assert ds.label == "Foo"


def test_profile_missing(repository, ds: Datastream):
    assert ds.profile == {}
    assert ds.new

    # absence is cached as well
    assert ds.new
    assert len(repository.calls_to("fetch_profile")) == 1


def test_profile_malformed(repository, ds: Datastream):
    repository.profiles[(ds.pid, ds.dsid)] = "<datastreamProfile>"

    assert ds.profile == {}
    assert ds.new


@mark.fail("fetch_profile")
@mark.profile({"dsLabel": "Foo"})
def test_profile_fetch_failure(ds: Datastream):
    """
    Failure to get profile is treated as nonexistence.
    """
    assert ds.new
    assert ds.label is None
    assert ds.control_group == "M"


@mark.profile({"dsLabel": "Foo"})
def test_new_recomputed(repository, ds: Datastream):
    """
    New state follows the profile each time it's checked.
    """
    assert not ds.new

    del repository.profiles[(ds.pid, ds.dsid)]
    assert not ds.new

    ds.invalidate()
    assert ds.new


def test_profile_latin1(repository, ds: Datastream):
    repository.profiles[(ds.pid, ds.dsid)] = (
        '<?xml version="1.0" encoding="ISO-8859-1"?>'
        "<datastreamProfile><dsLabel>Café</dsLabel></datastreamProfile>"
    ).encode("latin-1")

    assert not ds.new
    assert ds.label == "Café"


def test_profile_undecodable(repository, ds: Datastream):
    repository.profiles[(ds.pid, ds.dsid)] = (
        b'<?xml version="1.0" encoding="UTF-8"?>'
        b"<datastreamProfile><dsLabel>\xff</dsLabel></datastreamProfile>"
    )

    assert ds.new
    assert ds.label is None


def test_profile_transport_error(repository, ds: Datastream, caplog):
    """
    Errors other than those raised by the repository client are treated as
    nonexistence as well.
    """

    def fetch_profile(pid: str, dsid: str):
        raise OSError("Connection reset by peer")

    repository.fetch_profile = fetch_profile

    assert ds.new is True
    assert ds.control_group == "M"
    assert "Connection reset by peer" in caplog.text
