"""Diagnostic engine settings"""

from dataclasses import dataclass

from utils.env_config import DEFAULTS, get_config, get_config_float, get_config_int


def _positive_int(key: str) -> int:
    default = int(DEFAULTS[key])
    value = get_config_int(key, default)
    return value if value > 0 else default


@dataclass
class EngineConfig:
    """
    Targets and tuning for a diagnostic run.

    Attributes:
        endpoint: Host probed by HTTP, DNS, traceroute and ping
        ipinfo_url: Service returning the client's public IP details
        dns_server: Resolver used for the second DNS lookup
        http_timeout: Seconds per HTTP request
        ping_count: Echo requests sent by the ping step
        traceroute_wait: Seconds to wait per traceroute probe
        command_timeout: Upper bound in seconds for any external command
        step_delay: Pause between steps so the UI can catch up
        user_agent: Sent with HTTP requests
    """
    endpoint: str = DEFAULTS['NETDIAG_ENDPOINT']
    ipinfo_url: str = DEFAULTS['NETDIAG_IPINFO_URL']
    dns_server: str = DEFAULTS['NETDIAG_DNS_SERVER']
    http_timeout: int = int(DEFAULTS['NETDIAG_HTTP_TIMEOUT'])
    ping_count: int = int(DEFAULTS['NETDIAG_PING_COUNT'])
    traceroute_wait: int = int(DEFAULTS['NETDIAG_TRACEROUTE_WAIT'])
    command_timeout: int = int(DEFAULTS['NETDIAG_COMMAND_TIMEOUT'])
    step_delay: float = float(DEFAULTS['NETDIAG_STEP_DELAY'])
    user_agent: str = "netdiag/1.0"

    @classmethod
    def from_env(cls) -> 'EngineConfig':
        """Build from environment variables and .env values."""
        from __version__ import get_version

        step_delay = get_config_float('NETDIAG_STEP_DELAY', float(DEFAULTS['NETDIAG_STEP_DELAY']))
        return cls(
            endpoint=get_config('NETDIAG_ENDPOINT').strip() or DEFAULTS['NETDIAG_ENDPOINT'],
            ipinfo_url=get_config('NETDIAG_IPINFO_URL').strip() or DEFAULTS['NETDIAG_IPINFO_URL'],
            dns_server=get_config('NETDIAG_DNS_SERVER').strip() or DEFAULTS['NETDIAG_DNS_SERVER'],
            http_timeout=_positive_int('NETDIAG_HTTP_TIMEOUT'),
            ping_count=_positive_int('NETDIAG_PING_COUNT'),
            traceroute_wait=_positive_int('NETDIAG_TRACEROUTE_WAIT'),
            command_timeout=_positive_int('NETDIAG_COMMAND_TIMEOUT'),
            step_delay=max(step_delay, 0.0),
            user_agent=f"netdiag/{get_version()}",
        )
