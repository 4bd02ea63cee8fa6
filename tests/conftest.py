"""Shared fixtures: a small Doxygen XML export written to a temp directory.

The export covers the cases the builder and resolver must distinguish:

* ``a.h`` defines ``ns::Widget`` and documents part of namespace ``ns``;
* ``b.h`` only forward-declares ``ns::Widget`` and documents the rest of
  ``ns``;
* ``empty.h`` holds a class with private members only and must be dropped;
* pages ``Intro`` (parent) and ``Details`` (child) with an image, a formula
  and a code listing.
"""

from __future__ import annotations

import typing as typ
from pathlib import Path

import pytest
from lxml import etree

from doxysync.doxygen.models import RenderContext
from doxysync.doxygen.transcoder import MarkupTranscoder
from doxysync.logger import reset_logging

if typ.TYPE_CHECKING:
    import collections.abc as cabc

PNG_BYTES = b"\x89PNG\r\n\x1a\n fixture image"

INDEX_XML = """<?xml version='1.0' encoding='UTF-8' standalone='no'?>
<doxygenindex version="1.9.8">
  <compound refid="classns_1_1Widget" kind="class"><name>ns::Widget</name></compound>
  <compound refid="namespacens" kind="namespace"><name>ns</name></compound>
  <compound refid="a_8h" kind="file"><name>a.h</name></compound>
  <compound refid="b_8h" kind="file"><name>b.h</name></compound>
  <compound refid="empty_8h" kind="file"><name>empty.h</name></compound>
  <compound refid="intro" kind="page"><name>intro</name></compound>
  <compound refid="details" kind="page"><name>details</name></compound>
</doxygenindex>
"""

A_H_XML = """<?xml version='1.0' encoding='UTF-8' standalone='no'?>
<doxygen version="1.9.8">
  <compounddef id="a_8h" kind="file" language="C++">
    <compoundname>a.h</compoundname>
    <innerclass refid="classns_1_1Widget" prot="public">ns::Widget</innerclass>
    <innernamespace refid="namespacens">ns</innernamespace>
    <briefdescription/>
    <detaileddescription/>
    <location file="include/a.h"/>
  </compounddef>
</doxygen>
"""

B_H_XML = """<?xml version='1.0' encoding='UTF-8' standalone='no'?>
<doxygen version="1.9.8">
  <compounddef id="b_8h" kind="file" language="C++">
    <compoundname>b.h</compoundname>
    <innerclass refid="classns_1_1Widget" prot="public">ns::Widget</innerclass>
    <innerclass refid="classns_1_1Missing" prot="public">ns::Missing</innerclass>
    <innernamespace refid="namespacens">ns</innernamespace>
    <briefdescription/>
    <detaileddescription/>
    <location file="include/b.h"/>
  </compounddef>
</doxygen>
"""

WIDGET_XML = """<?xml version='1.0' encoding='UTF-8' standalone='no'?>
<doxygen version="1.9.8">
  <compounddef id="classns_1_1Widget" kind="class" language="C++" prot="public">
    <compoundname>ns::Widget</compoundname>
    <includes local="no">a.h</includes>
    <sectiondef kind="public-type">
      <memberdef kind="enum" id="classns_1_1Widget_1aMode" prot="public" static="no" strong="yes">
        <type/>
        <name>Mode</name>
        <enumvalue id="classns_1_1Widget_1aModeFast" prot="public">
          <name>Fast</name>
          <initializer>= 1</initializer>
          <briefdescription><para>Quick.</para></briefdescription>
          <detaileddescription/>
        </enumvalue>
        <enumvalue id="classns_1_1Widget_1aModeSafe" prot="public">
          <name>Safe</name>
          <briefdescription/>
          <detaileddescription/>
        </enumvalue>
        <briefdescription><para>Operating mode.</para></briefdescription>
        <detaileddescription/>
        <location file="include/a.h" declfile="include/a.h"/>
      </memberdef>
    </sectiondef>
    <sectiondef kind="public-func">
      <memberdef kind="function" id="classns_1_1Widget_1aResize" prot="public" static="no" const="no" virt="non-virtual">
        <type>void</type>
        <definition>void ns::Widget::resize</definition>
        <argsstring>(int width, const Widget &amp;other=Widget())</argsstring>
        <name>resize</name>
        <param><type>int</type><declname>width</declname></param>
        <param><type>const <ref refid="classns_1_1Widget" kindref="compound">Widget</ref> &amp;</type><declname>other</declname><defval>Widget()</defval></param>
        <briefdescription><para>Resize to match <ref refid="classns_1_1Gadget" kindref="compound">Gadget</ref>.</para></briefdescription>
        <detaileddescription>
          <para>
            <parameterlist kind="param">
              <parameteritem>
                <parameternamelist><parametername direction="in">width</parametername></parameternamelist>
                <parameterdescription><para>New width.</para></parameterdescription>
              </parameteritem>
            </parameterlist>
            <simplesect kind="return"><para>Nothing.</para></simplesect>
          </para>
        </detaileddescription>
        <location file="include/a.h" declfile="include/a.h"/>
      </memberdef>
      <memberdef kind="function" id="classns_1_1Widget_1aSecret" prot="private" static="no">
        <type>void</type>
        <name>secret</name>
        <briefdescription/>
        <detaileddescription/>
        <location file="include/a.h"/>
      </memberdef>
      <memberdef kind="friend" id="classns_1_1Widget_1aFriend" prot="public" static="no">
        <type>friend class</type>
        <name>Helper</name>
        <briefdescription/>
        <detaileddescription/>
        <location file="include/a.h"/>
      </memberdef>
    </sectiondef>
    <briefdescription><para>A resizable widget.</para></briefdescription>
    <detaileddescription/>
    <location file="include/a.h"/>
  </compounddef>
</doxygen>
"""

NAMESPACE_XML = """<?xml version='1.0' encoding='UTF-8' standalone='no'?>
<doxygen version="1.9.8">
  <compounddef id="namespacens" kind="namespace" language="C++">
    <compoundname>ns</compoundname>
    <innerclass refid="classns_1_1Widget" prot="public">ns::Widget</innerclass>
    <sectiondef kind="var">
      <memberdef kind="variable" id="namespacens_1aMax" prot="public" static="no">
        <type>constexpr int</type>
        <definition>constexpr int ns::kMax</definition>
        <argsstring/>
        <name>kMax</name>
        <initializer>= 8</initializer>
        <briefdescription><para>Upper bound.</para></briefdescription>
        <detaileddescription/>
        <location file="include/a.h" declfile="include/a.h"/>
      </memberdef>
    </sectiondef>
    <sectiondef kind="func">
      <memberdef kind="function" id="namespacens_1aHelper" prot="public" static="no">
        <type>bool</type>
        <definition>bool ns::helper</definition>
        <argsstring>()</argsstring>
        <name>helper</name>
        <briefdescription><para>Uses <ref refid="namespacens_1aMax" kindref="member">kMax</ref>.</para></briefdescription>
        <detaileddescription/>
        <location file="include/b.h" declfile="include/b.h"/>
      </memberdef>
    </sectiondef>
    <briefdescription/>
    <detaileddescription/>
  </compounddef>
</doxygen>
"""

EMPTY_H_XML = """<?xml version='1.0' encoding='UTF-8' standalone='no'?>
<doxygen version="1.9.8">
  <compounddef id="empty_8h" kind="file" language="C++">
    <compoundname>empty.h</compoundname>
    <innerclass refid="classHidden" prot="public">Hidden</innerclass>
    <briefdescription/>
    <detaileddescription/>
    <location file="include/empty.h"/>
  </compounddef>
</doxygen>
"""

HIDDEN_XML = """<?xml version='1.0' encoding='UTF-8' standalone='no'?>
<doxygen version="1.9.8">
  <compounddef id="classHidden" kind="class" language="C++" prot="public">
    <compoundname>Hidden</compoundname>
    <includes local="no">empty.h</includes>
    <sectiondef kind="private-attrib">
      <memberdef kind="variable" id="classHidden_1aValue" prot="private" static="no">
        <type>int</type>
        <name>value</name>
        <briefdescription/>
        <detaileddescription/>
        <location file="include/empty.h"/>
      </memberdef>
    </sectiondef>
    <briefdescription/>
    <detaileddescription/>
    <location file="include/empty.h"/>
  </compounddef>
</doxygen>
"""

INTRO_XML = """<?xml version='1.0' encoding='UTF-8' standalone='no'?>
<doxygen version="1.9.8">
  <compounddef id="intro" kind="page">
    <compoundname>intro</compoundname>
    <title>Intro</title>
    <innerpage refid="details">Details</innerpage>
    <briefdescription/>
    <detaileddescription>
      <para>Start with <ref refid="classns_1_1Widget" kindref="compound">Widget</ref>.</para>
      <sect1 id="intro_1overview">
        <title>Overview</title>
        <para><image type="html" name="diagram.png">Diagram</image>{width: 50%}</para>
        <para>Energy is <formula id="0">$E = mc^2$</formula>.</para>
      </sect1>
    </detaileddescription>
    <location file="docs/intro.md"/>
  </compounddef>
</doxygen>
"""

DETAILS_XML = """<?xml version='1.0' encoding='UTF-8' standalone='no'?>
<doxygen version="1.9.8">
  <compounddef id="details" kind="page">
    <compoundname>details</compoundname>
    <title>Details</title>
    <briefdescription/>
    <detaileddescription>
      <para>Back to <ref refid="intro_1overview" kindref="member">the overview</ref>.</para>
      <para><image type="html" name="missing.png"/></para>
      <para>
        <programlisting filename=".cpp">
          <codeline><highlight class="normal"><sp/><sp/><sp/><sp/></highlight><highlight class="keyword">int</highlight><highlight class="normal"><sp/>x;</highlight></codeline>
          <codeline><highlight class="normal"><sp/><sp/><sp/><sp/><sp/><sp/>x++;</highlight></codeline>
        </programlisting>
      </para>
    </detaileddescription>
    <location file="docs/details.md"/>
  </compounddef>
</doxygen>
"""

EXPORT_DOCUMENTS: dict[str, str] = {
    "index.xml": INDEX_XML,
    "a_8h.xml": A_H_XML,
    "b_8h.xml": B_H_XML,
    "classns_1_1Widget.xml": WIDGET_XML,
    "namespacens.xml": NAMESPACE_XML,
    "empty_8h.xml": EMPTY_H_XML,
    "classHidden.xml": HIDDEN_XML,
    "intro.xml": INTRO_XML,
    "details.xml": DETAILS_XML,
}


def write_export(xml_dir: Path, documents: dict[str, str] | None = None) -> Path:
    """Write the fixture export (or ``documents``) into ``xml_dir``."""
    xml_dir.mkdir(parents=True, exist_ok=True)
    for name, content in (documents or EXPORT_DOCUMENTS).items():
        (xml_dir / name).write_text(content, encoding="utf-8")
    (xml_dir / "diagram.png").write_bytes(PNG_BYTES)
    return xml_dir


@pytest.fixture
def xml_dir(tmp_path: Path) -> Path:
    """Return a directory holding the fixture Doxygen export."""
    return write_export(tmp_path / "xml")


@pytest.fixture
def export_documents() -> dict[str, str]:
    """Return a mutable copy of the fixture export documents."""
    return dict(EXPORT_DOCUMENTS)


@pytest.fixture
def make_export(tmp_path: Path) -> cabc.Callable[[dict[str, str]], Path]:
    """Return a helper writing a customised export into a temp directory."""

    def _make(documents: dict[str, str]) -> Path:
        return write_export(tmp_path / "custom-xml", documents)

    return _make


@pytest.fixture
def transcoder() -> MarkupTranscoder:
    """Return a transcoder bound to an in-memory document."""
    return MarkupTranscoder(RenderContext(document="fixture.xml", identifier="fixture"))


@pytest.fixture
def render(transcoder: MarkupTranscoder) -> cabc.Callable[[str], str]:
    """Return a helper rendering an XML snippet with the shared transcoder."""

    def _render(snippet: str) -> str:
        return transcoder.render(etree.fromstring(snippet))

    return _render


@pytest.fixture(autouse=True)
def _reset_doxysync_logging() -> cabc.Iterator[None]:
    """Undo CLI logging setup so caplog sees records in every test."""
    yield
    reset_logging()
