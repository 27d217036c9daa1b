import re
from dataclasses import dataclass, field

from compat_scanner.models import CheckResult
from compat_scanner.website import EMBED, WebsiteContext
from compat_scanner.checks.common import line_number


@dataclass
class Library:
    name: str
    # (major prefix, minimum patch level within that major)
    min_versions: list[tuple[str, str]]
    pattern: re.Pattern
    patch_optional: bool = False

    def find_version(self, text: str):
        match = self.pattern.search(text)
        return ".".join(match.groups()) if match else None


LIBRARIES = [
    Library(
        "jQuery",
        [("1.6.", "4"), ("1.7.", "2"), ("1.8.", "2"), ("1.9.", "1"), ("1.10.", "2"), ("2.0.", "3")],
        re.compile(r'jquery:\s*"([^"]+)'),
        patch_optional=True,
    ),
    Library(
        "jQuery UI",
        [("1.8.", "24"), ("1.9.", "2"), ("1.10.", "3")],
        re.compile(r'\.ui,\s*\{\s*version:\s*"([^"]+)'),
    ),
    Library(
        "Prototype",
        [("1.7.", "1")],
        re.compile(r"Prototype JavaScript framework, version (\d+\.\d+\.\d+)"),
    ),
    Library(
        "Dojo",
        [("1.5.", "2"), ("1.6.", "1"), ("1.7.", "3"), ("1.8.", "0")],
        re.compile(r"\.version\s*=\s*\{\s*major:\s*(\d+)\D+(\d+)\D+(\d+)"),
    ),
    Library(
        "Mootools",
        [("1.2.", "6"), ("1.4.", "5")],
        re.compile(r"this\.MooTools\s*=\s*\{version:\s*'(\d+\.\d+\.\d+)"),
    ),
    Library(
        "SWFObject",
        [("2.", "2")],
        re.compile(r"\*\s+SWFObject v(\d+\.\d+)"),
    ),
    Library(
        "jQuery Form Plugin",
        [("3.", "22")],
        re.compile(r"Form Plugin\s+\*\s+version: (\d+\.\d+)"),
    ),
    Library(
        # The version variable lives far from Modernizr._version; rely on the header comment
        "Modernizr",
        [("2.5.", "2"), ("2.6.", "2")],
        re.compile(r"\*\s*Modernizr\s+(\d+\.\d+\.\d+)"),
    ),
]


def _numbers(version: str) -> tuple:
    return tuple(int(part) for part in re.findall(r"\d+", version)[:3])


def check_version(library: Library, version: str) -> dict:
    if library.patch_optional:
        # 1.7 and 1.7b2 mean 1.7.0 and 1.7.0b2
        parts = re.match(r"^(\d+\.\d+)(.*)$", version)
        if parts and not re.match(r"^\.\d+", parts.group(2)):
            version = parts.group(1) + ".0" + parts.group(2)

    major, minor = library.min_versions[0]
    info = {
        "name": library.name,
        "version": version,
        "minVersion": major + minor,
        # Versions outside every listed branch are judged against the oldest supported one
        "needsUpdate": _numbers(version) < _numbers(major + minor),
    }
    for major, minor in library.min_versions:
        if version.startswith(major):
            info["minVersion"] = major + minor
            try:
                info["needsUpdate"] = float(version[len(major):]) < int(minor)
            except ValueError:
                # pre-release suffixes such as 4b2
                info["needsUpdate"] = False
            break
    return info


def check_js_libs(website: WebsiteContext) -> CheckResult:
    outdated = []
    for js in website.js:
        if js.url == EMBED:
            continue
        for library in LIBRARIES:
            version = library.find_version(js.content)
            if not version:
                continue
            info = check_version(library, version)
            if info["needsUpdate"]:
                info["url"] = js.src
                info["lineNumber"] = line_number(website.html, website.html.find(js.src or ""))
                outdated.append(info)
                break

    return CheckResult(test_name="jslibs", passed=not outdated, data=outdated)
