"""
Network Probes

The individual checks a diagnostic run is made of. Each probe either
returns its report text or raises ProbeError; streaming probes hand each
output line to a callback as it is produced.

Functions:
- fetch_ip_info: Public IP details of this client
- http_head: Response line and headers of the endpoint
- dns_lookup: dig (nslookup on Windows), system or explicit resolver
- traceroute: Route to the endpoint, streamed
- ping: Echo round trips to the endpoint, streamed
"""

import json
import logging
import os
import subprocess
import threading
from typing import Callable, List, Optional

import requests

logger = logging.getLogger(__name__)

LineCallback = Callable[[str], None]

HTTP_VERSIONS = {
    9: "HTTP/0.9",
    10: "HTTP/1.0",
    11: "HTTP/1.1",
    20: "HTTP/2",
}


class ProbeError(Exception):
    """A probe failed. partial_output holds whatever it printed first."""

    def __init__(self, message: str, partial_output: str = ""):
        super().__init__(message)
        self.partial_output = partial_output


def is_windows() -> bool:
    return os.name == "nt"


# ==================== HTTP probes ====================

def fetch_ip_info(url: str, timeout: int = 10, user_agent: Optional[str] = None) -> str:
    """Fetch the client's public IP details, pretty-printed when JSON."""
    headers = {"User-Agent": user_agent} if user_agent else {}
    try:
        response = requests.get(url, timeout=timeout, headers=headers)
    except requests.RequestException as e:
        raise ProbeError(f"IP info failed: {e}") from e

    body = response.text
    try:
        return json.dumps(json.loads(body), indent=2)
    except ValueError:
        return body


def http_head(host: str, timeout: int = 10, user_agent: Optional[str] = None) -> str:
    """HEAD https://host without following redirects.

    Returns:
        Status, status code, protocol and the sorted response headers
    """
    headers = {"User-Agent": user_agent} if user_agent else {}
    try:
        response = requests.head(
            f"https://{host}",
            timeout=timeout,
            headers=headers,
            allow_redirects=False,
        )
    except requests.RequestException as e:
        raise ProbeError(f"making HTTP HEAD request: {e}") from e

    raw_version = getattr(response.raw, "version", None)
    protocol = HTTP_VERSIONS.get(raw_version, "HTTP/1.1")

    lines = [
        f"Status: {response.status_code} {response.reason or ''}".rstrip(),
        f"Status Code: {response.status_code}",
        f"Protocol: {protocol}",
        "",
        "Response Headers:",
    ]
    for name in sorted(response.headers.keys(), key=str.lower):
        lines.append(f"  {name}: {response.headers[name]}")

    return "\n".join(lines) + "\n"


# ==================== Command probes ====================

def build_dns_command(host: str, server: Optional[str] = None) -> List[str]:
    if is_windows():
        return ["nslookup", host, server] if server else ["nslookup", host]
    return ["dig", f"@{server}", host] if server else ["dig", host]


def build_traceroute_command(host: str, wait: int = 3) -> List[str]:
    if is_windows():
        return ["tracert", "-w", str(wait * 1000), host]
    # ICMP probes, two queries per hop
    return ["traceroute", "-I", "-q", "2", "-w", str(wait), host]


def build_ping_command(host: str, count: int = 10) -> List[str]:
    if is_windows():
        return ["ping", "-n", str(count), host]
    return ["ping", "-c", str(count), host]


def dns_lookup(host: str, server: Optional[str] = None, timeout: int = 30) -> str:
    """Resolve host with dig/nslookup.

    A missing lookup tool is reported as text, not as a failure.
    """
    cmd = build_dns_command(host, server)
    try:
        result = subprocess.run(
            cmd,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            timeout=timeout,
        )
    except FileNotFoundError:
        return f"{cmd[0]} command not available on this system\n"
    except subprocess.TimeoutExpired as e:
        partial = e.output if isinstance(e.output, str) else ""
        raise ProbeError(f"DNS lookup timed out after {timeout}s", partial) from e

    resolver = server or "system DNS"
    if result.returncode != 0:
        raise ProbeError(
            f"{cmd[0]} ({resolver}) failed with exit code {result.returncode}",
            result.stdout or "",
        )
    return result.stdout


def stream_command(cmd: List[str], on_line: LineCallback, timeout: int = 120,
                   skip_blank: bool = False, report_stderr: bool = False,
                   stop_event: Optional[threading.Event] = None) -> None:
    """Run cmd and pass each stdout line to on_line as it arrives.

    A non-zero exit is only a failure when the command printed nothing;
    traceroute in particular exits non-zero after useful output. Stderr is
    forwarded as a single "STDERR: ..." line when report_stderr is set or
    the command failed.

    Raises:
        ProbeError: Command missing, timed out, or failed without output
    """
    try:
        process = subprocess.Popen(
            cmd,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
        )
    except OSError as e:
        raise ProbeError(f"starting {cmd[0]}: {e}") from e

    timed_out = threading.Event()

    def _kill():
        timed_out.set()
        process.kill()

    timer = threading.Timer(timeout, _kill)
    timer.daemon = True
    timer.start()

    has_output = False
    try:
        for line in iter(process.stdout.readline, ''):
            if stop_event is not None and stop_event.is_set():
                process.kill()
                break
            line = line.rstrip("\r\n")
            if skip_blank and not line.strip():
                continue
            has_output = True
            on_line(line)

        stderr = process.stderr.read()
        returncode = process.wait()
    finally:
        timer.cancel()
        if process.poll() is None:
            process.kill()
            process.wait()
        process.stdout.close()
        process.stderr.close()

    failed = returncode != 0 and not has_output
    if stderr.strip() and (report_stderr or failed):
        on_line(f"STDERR: {stderr.rstrip()}")

    if timed_out.is_set():
        raise ProbeError(f"{cmd[0]} timed out after {timeout}s")
    if failed:
        raise ProbeError(f"{cmd[0]} command failed with exit code {returncode}")


def traceroute(host: str, on_line: LineCallback, wait: int = 3, timeout: int = 120,
               stop_event: Optional[threading.Event] = None) -> None:
    stream_command(build_traceroute_command(host, wait), on_line,
                   timeout=timeout, stop_event=stop_event)


def ping(host: str, on_line: LineCallback, count: int = 10, timeout: int = 120,
         stop_event: Optional[threading.Event] = None) -> None:
    stream_command(build_ping_command(host, count), on_line, timeout=timeout,
                   skip_blank=True, report_stderr=True, stop_event=stop_event)
