"""
Shared fixtures: QTI / manifest snippets and an in-memory cartridge builder.
"""

import zipfile
from pathlib import Path
from types import SimpleNamespace
from typing import Dict, List, Optional, Tuple

import pytest


ASSESSMENT_TYPE = "imsqti_xmlv1p2/imscc_xmlv1p3/assessment"


MC_ITEM = """
<item ident="q1" title="Capital">
  <itemmetadata>
    <qtimetadata>
      <qtimetadatafield><fieldlabel>cc_profile</fieldlabel><fieldentry>cc.multiple_choice.v0p1</fieldentry></qtimetadatafield>
      <qtimetadatafield><fieldlabel>cc_weighting</fieldlabel><fieldentry>2</fieldentry></qtimetadatafield>
    </qtimetadata>
  </itemmetadata>
  <presentation>
    <material><mattext texttype="text/html">&lt;p&gt;Capital of &lt;b&gt;France&lt;/b&gt;?&lt;/p&gt;</mattext></material>
    <response_lid ident="response1" rcardinality="Single">
      <render_choice>
        <response_label ident="A"><material><mattext texttype="text/plain">Paris</mattext></material></response_label>
        <response_label ident="B"><material><mattext texttype="text/plain">Rome</mattext></material></response_label>
      </render_choice>
    </response_lid>
  </presentation>
  <resprocessing>
    <outcomes><decvar maxvalue="100" minvalue="0" varname="SCORE" vartype="Decimal"/></outcomes>
    <respcondition continue="Yes">
      <conditionvar><other/></conditionvar>
      <displayfeedback feedbacktype="Response" linkrefid="general_fb"/>
    </respcondition>
    <respcondition continue="No">
      <conditionvar><varequal respident="response1"> A </varequal></conditionvar>
      <setvar action="Set" varname="SCORE">100</setvar>
    </respcondition>
  </resprocessing>
</item>
"""

FIB_ITEM = """
<item ident="q2">
  <itemmetadata>
    <qtimetadata>
      <qtimetadatafield><fieldlabel>cc_profile</fieldlabel><fieldentry>cc.fib.v0p1</fieldentry></qtimetadatafield>
    </qtimetadata>
  </itemmetadata>
  <presentation>
    <material><mattext>Plants make food by ____.</mattext></material>
    <response_str ident="response1" rcardinality="Single"><render_fib/></response_str>
  </presentation>
  <resprocessing>
    <respcondition continue="No">
      <conditionvar><varequal respident="response1">photosynthesis</varequal></conditionvar>
      <setvar action="Set" varname="SCORE">100</setvar>
    </respcondition>
  </resprocessing>
</item>
"""

ESSAY_ITEM = """
<item ident="q3">
  <itemmetadata>
    <qtimetadata>
      <qtimetadatafield><fieldlabel>cc_profile</fieldlabel><fieldentry>cc.essay.v0p1</fieldentry></qtimetadatafield>
      <qtimetadatafield><fieldlabel>cc_weighting</fieldlabel><fieldentry>5</fieldentry></qtimetadatafield>
    </qtimetadata>
  </itemmetadata>
  <presentation>
    <material><mattext texttype="text/html">&lt;p&gt;Describe the water cycle.&lt;/p&gt;</mattext></material>
    <response_str ident="response1" rcardinality="Single"><render_fib/></response_str>
  </presentation>
</item>
"""

UNKNOWN_ITEM = """
<item ident="q4">
  <presentation>
    <material><mattext>Look at the diagram.</mattext></material>
  </presentation>
</item>
"""


def wrap_assessment(items: List[str], title: Optional[str] = "Unit 1 Quiz") -> str:
    title_attr = f' title="{title}"' if title is not None else ""
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<questestinterop xmlns="http://www.imsglobal.org/xsd/ims_qtiasiv1p2">\n'
        f'  <assessment ident="a1"{title_attr}>\n'
        '    <section ident="root_section">\n'
        + "".join(items) +
        '    </section>\n'
        '  </assessment>\n'
        '</questestinterop>\n'
    )


def wrap_items(items: List[str]) -> str:
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<questestinterop>\n' + "".join(items) + '</questestinterop>\n'
    )


def manifest_xml(resources: List[Tuple[str, str, Optional[str]]], subject: Optional[str] = "Biology 101") -> str:
    """resources: (identifier, type, file href or None)"""
    metadata = ""
    if subject is not None:
        metadata = (
            "  <metadata>\n"
            "    <schema>IMS Common Cartridge</schema>\n"
            "    <lomimscc:lom><lomimscc:general><lomimscc:title>"
            f"<lomimscc:string>{subject}</lomimscc:string>"
            "</lomimscc:title></lomimscc:general></lomimscc:lom>\n"
            "  </metadata>\n"
        )

    entries = []
    for identifier, resource_type, href in resources:
        file_elem = f'<file href="{href}"/>' if href else ""
        entries.append(f'    <resource identifier="{identifier}" type="{resource_type}">{file_elem}</resource>\n')

    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<manifest identifier="cc1" '
        'xmlns="http://www.imsglobal.org/xsd/imsccv1p3/imscp_v1p1" '
        'xmlns:lomimscc="http://ltsc.ieee.org/xsd/imsccv1p3/LOM/manifest">\n'
        + metadata +
        '  <organizations/>\n'
        '  <resources>\n' + "".join(entries) + '  </resources>\n'
        '</manifest>\n'
    )


def truncated_manifest_xml(resources: List[Tuple[str, str, Optional[str]]]) -> str:
    """A manifest cut off before its closing </resources> and </manifest> tags."""
    text = manifest_xml(resources)
    return text.replace("  </resources>\n", "").replace("</manifest>\n", "")


@pytest.fixture
def qti():
    """QTI and manifest snippets."""
    return SimpleNamespace(
        MC_ITEM=MC_ITEM,
        FIB_ITEM=FIB_ITEM,
        ESSAY_ITEM=ESSAY_ITEM,
        UNKNOWN_ITEM=UNKNOWN_ITEM,
        ASSESSMENT_TYPE=ASSESSMENT_TYPE,
        wrap_assessment=wrap_assessment,
        wrap_items=wrap_items,
        manifest_xml=manifest_xml,
        truncated_manifest_xml=truncated_manifest_xml,
    )


@pytest.fixture
def build_cartridge(tmp_path):
    """Return a function writing {member: text} into a zip under tmp_path."""
    def _build(members: Dict[str, Optional[str]], name: str = "course.imscc") -> Path:
        archive_path = tmp_path / name
        with zipfile.ZipFile(archive_path, "w", zipfile.ZIP_DEFLATED) as zf:
            for member, content in members.items():
                if member.endswith("/"):
                    zf.writestr(zipfile.ZipInfo(member), "")
                else:
                    zf.writestr(member, content or "")
        return archive_path

    return _build


@pytest.fixture
def sample_cartridge(build_cartridge, qti):
    """Cartridge with two good quizzes and three resources that must be skipped."""
    manifest = manifest_xml([
        ("r1", ASSESSMENT_TYPE, "r1/assessment_qti.xml"),
        ("r2", "webcontent", "wiki_content/page.html"),
        ("r3", ASSESSMENT_TYPE, "r3/missing.xml"),
        ("r4", ASSESSMENT_TYPE, "r4/broken.xml"),
        ("r5", ASSESSMENT_TYPE, "r5/single.xml"),
        ("r6", ASSESSMENT_TYPE, None),
    ])
    return build_cartridge({
        "imsmanifest.xml": manifest,
        "r1/": None,
        "r1/assessment_qti.xml": wrap_assessment([MC_ITEM, ESSAY_ITEM, UNKNOWN_ITEM]),
        "wiki_content/page.html": "<html><body>Hello</body></html>",
        "r4/broken.xml": "this is not xml at all",
        "r5/single.xml": wrap_items([FIB_ITEM]),
    })
