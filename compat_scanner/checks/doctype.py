import re

from compat_scanner.models import CheckResult
from compat_scanner.website import WebsiteContext
from compat_scanner.checks.common import line_number

# Comments and an XML prolog may precede the doctype without triggering quirks.
# See http://msdn.microsoft.com/en-us/library/ie/ms535242(v=vs.85).aspx
HEAD_RE = re.compile(r"^(?:\s*<!--.*?-->)*\s*(?:<\?xml.*?>)?\s*<!doctype html\s*([^>]*)>", re.S)
# public|system, "public identifier", "system identifier"?
PUBSYS_RE = re.compile(r'^(public|system)\s*"([^"]*)"\s*("[^"]*")?')
# (x)html, version, variant (e.g. "transitional")
PUBID_RE = re.compile(r"-//w3c//dtd (x?html)\S*\s*([\d.]+)?\s*(\w+)?//en")
STANDARDS_PUBIDS = {
    "iso/iec 15445:1999//dtd hypertext markup language//en",
    "iso/iec 15445:1999//dtd html//en",
    "-//ietf//dtd html i18n//en",
    "-//unknown//en",
}


def _public_mode(pubid: str, sysid) -> tuple[bool, str]:
    match = PUBID_RE.search(pubid)
    if not match:
        return False, "Invalid or Quirks doctype"

    html_type, version, variant = match.groups()
    standards = True
    if html_type == "html" and version:
        if float(version) < 4.0:
            standards = False
        elif version in ("4.0", "4.01") and variant and re.search("frameset|transitional", variant) and not sysid:
            # HTML4 frameset/transitional only gets standards mode with a system id
            standards = False

    mode = " ".join(part for part in (html_type, version, variant) if part)
    return standards, mode


def check_doctype(website: WebsiteContext) -> CheckResult:
    # The doctype has to be near the top; don't scan the whole document
    head = website.html[:2000].strip().lower()
    data = {"lineNumber": -1, "mode": ["No doctype"]}
    passed = False

    match = HEAD_RE.match(head)
    if match:
        data["lineNumber"] = line_number(head, head.find("<!doctype"))
        innards = match.group(1).strip()

        if not innards:
            passed, mode = True, "html5"
        else:
            mode = "Invalid or Quirks doctype"
            pubsys = PUBSYS_RE.match(innards)
            if pubsys:
                kind, pubid, sysid = pubsys.groups()
                if kind == "system":
                    passed, mode = True, "html (system)"
                elif pubid == "" and sysid is None:
                    passed, mode = True, "html5 (long form)"
                elif pubid in STANDARDS_PUBIDS:
                    passed, mode = True, "html standards"
                elif pubid:
                    passed, mode = _public_mode(pubid, sysid)
        data["mode"] = [mode]

    return CheckResult(test_name="doctype", passed=passed, data=data)
