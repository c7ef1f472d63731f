"""Unit tests for the system ping echo transport."""

import asyncio
from unittest.mock import patch

import pytest

from netmonitor.adapters.transport.system_ping import SystemPingTransport
from netmonitor.core.errors import EchoError
from netmonitor.core.models import EchoReply, EchoStatus

PAYLOAD = b"a" * 32

LINUX_REPLY = """\
PING 142.250.74.36 (142.250.74.36) 32(60) bytes of data.
40 bytes from 142.250.74.36: icmp_seq=1 ttl=117 time=14.2 ms

--- 142.250.74.36 ping statistics ---
1 packets transmitted, 1 received, 0% packet loss, time 0ms
rtt min/avg/max/mdev = 14.212/14.212/14.212/0.000 ms
"""

LINUX_NO_REPLY = """\
PING 10.255.255.1 (10.255.255.1) 32(60) bytes of data.

--- 10.255.255.1 ping statistics ---
1 packets transmitted, 0 received, 100% packet loss, time 0ms
"""

LINUX_UNREACHABLE = """\
PING 10.0.0.9 (10.0.0.9) 32(60) bytes of data.
From 10.0.0.2 icmp_seq=1 Destination Host Unreachable

--- 10.0.0.9 ping statistics ---
1 packets transmitted, 0 received, +1 errors, 100% packet loss, time 0ms
"""

WINDOWS_REPLY = """\
Pinging 192.168.1.1 with 32 bytes of data:
Reply from 192.168.1.1: bytes=32 time<1ms TTL=64
"""

WINDOWS_TIMEOUT = """\
Pinging 10.255.255.1 with 32 bytes of data:
Request timed out.
"""


class FakeProcess:
    """Stand-in for asyncio.subprocess.Process."""

    def __init__(self, output: str = "", returncode: int = 0, hang: bool = False):
        self.output = output.encode()
        self._exit_code = returncode
        self.hang = hang
        self.returncode: int | None = None
        self.killed = False

    async def communicate(self) -> tuple[bytes, None]:
        if self.hang:
            await asyncio.sleep(60)
        self.returncode = self._exit_code
        return self.output, None

    def kill(self) -> None:
        self.killed = True
        self.returncode = -9

    async def wait(self) -> int:
        return self.returncode


class TestBuildCommand:
    """Test the ping command line for each platform."""

    def test_linux(self) -> None:
        transport = SystemPingTransport(platform="linux")
        cmd = transport.build_command("192.168.1.1", 1000, PAYLOAD)

        assert cmd == [
            "ping", "-n", "-c", "1", "-W", "1", "-M", "do",
            "-s", "32", "-p", "61" * 16, "192.168.1.1",
        ]

    def test_linux_rounds_timeout_up_to_seconds(self) -> None:
        transport = SystemPingTransport(platform="linux")
        cmd = transport.build_command("192.168.1.1", 1500, PAYLOAD)
        assert cmd[cmd.index("-W") + 1] == "2"

        cmd = transport.build_command("192.168.1.1", 200, PAYLOAD)
        assert cmd[cmd.index("-W") + 1] == "1"

    def test_linux_without_dont_fragment(self) -> None:
        transport = SystemPingTransport(platform="linux")
        cmd = transport.build_command("192.168.1.1", 1000, PAYLOAD, dont_fragment=False)
        assert "-M" not in cmd

    def test_darwin(self) -> None:
        transport = SystemPingTransport(ping_binary="/sbin/ping", platform="darwin")
        cmd = transport.build_command("www.google.com", 750, b"xyz")

        assert cmd == [
            "/sbin/ping", "-n", "-c", "1", "-W", "750", "-D",
            "-s", "3", "-p", "78797a", "www.google.com",
        ]

    def test_windows(self) -> None:
        transport = SystemPingTransport(platform="win32")
        cmd = transport.build_command("www.google.com", 1000, PAYLOAD)

        assert cmd == ["ping", "-n", "1", "-w", "1000", "-l", "32", "-f", "www.google.com"]


class TestParseOutput:
    """Test interpretation of ping output."""

    def test_linux_reply(self) -> None:
        reply = SystemPingTransport.parse_output(0, LINUX_REPLY)
        assert reply == EchoReply(status=EchoStatus.SUCCESS, round_trip_ms=14.2)

    def test_windows_sub_millisecond_reply(self) -> None:
        reply = SystemPingTransport.parse_output(0, WINDOWS_REPLY)
        assert reply == EchoReply(status=EchoStatus.SUCCESS, round_trip_ms=1.0)

    def test_no_reply_is_timeout(self) -> None:
        reply = SystemPingTransport.parse_output(1, LINUX_NO_REPLY)
        assert reply.status is EchoStatus.TIMED_OUT

    def test_windows_request_timed_out(self) -> None:
        reply = SystemPingTransport.parse_output(1, WINDOWS_TIMEOUT)
        assert reply.status is EchoStatus.TIMED_OUT

    def test_host_unreachable(self) -> None:
        reply = SystemPingTransport.parse_output(1, LINUX_UNREACHABLE)
        assert reply.status is EchoStatus.DESTINATION_HOST_UNREACHABLE

    def test_packet_too_big(self) -> None:
        output = "ping: local error: message too long, mtu=1400\n"
        reply = SystemPingTransport.parse_output(1, output)
        assert reply.status is EchoStatus.PACKET_TOO_BIG

    def test_unknown_host_raises(self) -> None:
        output = "ping: www.nonexistent.invalid: Name or service not known\n"
        with pytest.raises(EchoError, match="Name or service not known"):
            SystemPingTransport.parse_output(2, output)

    def test_silent_failure_reports_exit_status(self) -> None:
        with pytest.raises(EchoError, match="status 2"):
            SystemPingTransport.parse_output(2, "")


class TestEcho:
    """Test running ping as a child process."""

    @pytest.mark.asyncio
    async def test_successful_echo(self) -> None:
        transport = SystemPingTransport(platform="linux")
        proc = FakeProcess(LINUX_REPLY, returncode=0)

        with patch("asyncio.create_subprocess_exec", return_value=proc) as spawn:
            reply = await transport.echo("142.250.74.36", 1000, PAYLOAD)

        assert reply.round_trip_ms == 14.2
        assert spawn.call_args.args[-1] == "142.250.74.36"
        assert not proc.killed

    @pytest.mark.asyncio
    async def test_late_reply_counts_as_timeout(self) -> None:
        transport = SystemPingTransport(platform="linux")
        output = LINUX_REPLY.replace("time=14.2 ms", "time=450 ms")
        proc = FakeProcess(output, returncode=0)

        with patch("asyncio.create_subprocess_exec", return_value=proc):
            reply = await transport.echo("142.250.74.36", 300, PAYLOAD)

        assert reply == EchoReply(status=EchoStatus.TIMED_OUT)

    @pytest.mark.asyncio
    async def test_reply_at_timeout_is_kept(self) -> None:
        transport = SystemPingTransport(platform="linux")
        output = LINUX_REPLY.replace("time=14.2 ms", "time=300 ms")
        proc = FakeProcess(output, returncode=0)

        with patch("asyncio.create_subprocess_exec", return_value=proc):
            reply = await transport.echo("142.250.74.36", 300, PAYLOAD)

        assert reply == EchoReply(status=EchoStatus.SUCCESS, round_trip_ms=300.0)

    @pytest.mark.asyncio
    async def test_hung_process_is_killed(self) -> None:
        transport = SystemPingTransport(platform="linux")
        proc = FakeProcess(hang=True)

        with patch("asyncio.create_subprocess_exec", return_value=proc):
            reply = await transport.echo("10.255.255.1", 10, PAYLOAD)

        assert reply.status is EchoStatus.TIMED_OUT
        assert proc.killed

    @pytest.mark.asyncio
    async def test_missing_binary_raises(self) -> None:
        transport = SystemPingTransport(ping_binary="no-such-ping", platform="linux")

        with patch("asyncio.create_subprocess_exec", side_effect=FileNotFoundError()):
            with pytest.raises(EchoError, match="ping binary not found"):
                await transport.echo("192.168.1.1", 1000, PAYLOAD)
