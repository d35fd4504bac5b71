"""
EPUB validation via epubcheck.

Optional: a build never fails because epubcheck is missing, it only
reports what epubcheck found when it can be run.
"""

import os
import re
import shutil
import subprocess


SUMMARY_PATTERN = re.compile(
    r"Messages:\s*(\d+)\s*fatal.*?(\d+)\s*error.*?(\d+)\s*warn",
    re.DOTALL,
)


def find_epubcheck():
    """
    Command prefix for epubcheck, or None. Checks in order:
        1. EPUBCHECK_JAR environment variable
        2. epubcheck command on PATH
        3. tools/epubcheck*/epubcheck.jar under the project root
    """
    env_jar = os.environ.get("EPUBCHECK_JAR")
    if env_jar and os.path.exists(env_jar):
        return ["java", "-jar", env_jar]

    if shutil.which("epubcheck"):
        return ["epubcheck"]

    # scripts/binderlib/ → scripts/ → project root
    project_root = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
    tools = os.path.join(project_root, "tools")
    if os.path.isdir(tools):
        for entry in sorted(os.listdir(tools), reverse=True):
            jar = os.path.join(tools, entry, "epubcheck.jar")
            if entry.startswith("epubcheck") and os.path.exists(jar):
                return ["java", "-jar", jar]

    return None


def summarize(output):
    """(fatals, errors, warnings) from epubcheck's output, or None."""
    match = SUMMARY_PATTERN.search(output)
    if not match:
        return None
    return tuple(int(n) for n in match.groups())


def validate_epub(epub_path, verbose=False):
    """
    Run epubcheck on an epub file.

    Returns True if valid, False if errors, None if epubcheck is unavailable.
    """
    command = find_epubcheck()
    if command is None:
        if verbose:
            print("  Skipping validation: epubcheck not found")
            print("  Install epubcheck or set EPUBCHECK_JAR")
        return None

    if verbose:
        print("  Validating with epubcheck...")

    try:
        result = subprocess.run(command + [epub_path], capture_output=True, text=True)
    except FileNotFoundError:
        print("  Warning: Could not run epubcheck (java not found?)")
        return None

    output = result.stdout + result.stderr
    counts = summarize(output)

    if counts is None:
        if result.returncode == 0:
            print("  ✓ epubcheck: valid")
        else:
            print(f"  ✗ epubcheck: failed (exit code {result.returncode})")
    else:
        fatals, errors, warnings = counts
        if fatals == 0 and errors == 0 and warnings == 0:
            print("  ✓ epubcheck: valid (no errors, no warnings)")
        elif fatals == 0 and errors == 0:
            print(f"  ⚠ epubcheck: valid with {warnings} warning(s)")
        else:
            print(f"  ✗ epubcheck: {fatals} fatal, {errors} error(s), {warnings} warning(s)")

    if verbose or result.returncode != 0:
        for line in output.splitlines():
            if line.startswith(("ERROR", "WARNING", "FATAL")):
                print(f"    {line}")

    return result.returncode == 0
