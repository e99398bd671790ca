"""Tests for the fire-and-forget log emitter."""

import httpx
import pytest

from log_middleware import LogEmitter, RemoteLogRecord

from conftest import LOG_API_URL, FakeLogServer, RecordingTraceSink


class TestChannelsAndMapping:
    """Local trace channel and remote level for each input level."""

    @pytest.mark.parametrize(
        "level, channel, api_level",
        [
            ("debug", "info", "debug"),
            ("DEBUG", "info", "debug"),
            ("info", "info", "info"),
            ("Info", "info", "info"),
            ("warn", "warn", "warn"),
            ("WARN", "warn", "warn"),
            ("error", "error", "error"),
            ("ERROR", "error", "error"),
            ("fatal", "error", "fatal"),
            ("Fatal", "error", "fatal"),
        ],
    )
    async def test_level_mapping(self, emitter, trace, log_server, level, channel, api_level):
        """Each accepted level picks its channel and is sent lowercased."""
        await emitter.log("frontend", level, "Pkg", "Msg")

        assert trace.channels == [channel]
        assert len(log_server.requests) == 1
        assert log_server.payloads[0]["level"] == api_level

    async def test_error_trace_includes_original_stack(self, emitter, trace):
        """ERROR traces carry the stack exactly as passed."""
        await emitter.log("BackEnd", "ERROR", "Pkg", "Msg")

        channel, args = trace.calls[0]
        assert channel == "error"
        assert args == ("[Pkg]", "Msg", {"stack": "BackEnd"})

    async def test_missing_level_defaults_to_info(self, emitter, trace, log_server):
        """An absent level is traced and sent as info."""
        await emitter.log("frontend", None, "Pkg", "Msg")
        await emitter.log("frontend", "", "Pkg", "Msg")

        assert trace.channels == ["info", "info"]
        assert [p["level"] for p in log_server.payloads] == ["info", "info"]

    async def test_missing_stack_defaults_to_frontend(self, emitter, log_server):
        """None and empty stacks both use the default stack."""
        await emitter.log(None, "INFO", "Pkg", "Msg")
        await emitter.log("", "INFO", "Pkg", "Msg")

        assert [p["stack"] for p in log_server.payloads] == ["frontend", "frontend"]

    async def test_custom_default_stack(self, trace, log_server):
        """The default stack is configurable."""
        emitter = LogEmitter(
            LOG_API_URL,
            trace=trace,
            transport=httpx.MockTransport(log_server),
            default_stack="backend",
        )

        await emitter.log(None, "INFO", "Pkg", "Msg")

        assert log_server.payloads[0]["stack"] == "backend"

    async def test_success_is_sent_as_info(self, emitter, trace, log_server):
        """SUCCESS gets the success trace and is sent as info."""
        await emitter.log("BACKEND", "SUCCESS", "Pkg", "Msg")

        assert trace.channels == ["success"]
        assert log_server.payloads == [
            {"stack": "backend", "level": "info", "package": "Pkg", "message": "Msg"}
        ]


class TestValidation:
    """Invalid intents are traced and never sent."""

    async def test_unknown_stack(self, emitter, trace, log_server):
        """Unknown stack aborts delivery with an error trace."""
        await emitter.log("unknown-stack", "INFO", "Pkg", "Msg")

        assert trace.channels == ["info", "error"]
        assert 'Invalid stack for API: "unknown-stack"' in trace.text("error")[0]
        assert log_server.requests == []

    async def test_unknown_level(self, emitter, trace, log_server):
        """Unknown level is traced on the info channel, then rejected."""
        await emitter.log("frontend", "verbose", "Pkg", "Msg")

        assert trace.channels == ["info", "error"]
        assert 'Invalid level for API: "verbose"' in trace.text("error")[0]
        assert log_server.requests == []

    @pytest.mark.parametrize("package_name", ["", "   ", None])
    async def test_missing_package_name(self, emitter, trace, log_server, package_name):
        """Empty package name aborts delivery."""
        await emitter.log("frontend", "INFO", package_name, "Msg")

        assert "Package name cannot be empty" in trace.text("error")[0]
        assert log_server.requests == []

    @pytest.mark.parametrize("message", ["", "   ", None])
    async def test_missing_message(self, emitter, trace, log_server, message):
        """Empty message aborts delivery."""
        await emitter.log("frontend", "INFO", "Pkg", message)

        assert "Log message cannot be empty" in trace.text("error")[0]
        assert log_server.requests == []

    def test_prepare_returns_none_when_invalid(self, emitter):
        """No record is built for an invalid intent."""
        assert emitter.prepare("nowhere", "INFO", "Pkg", "Msg") is None

    def test_one_diagnostic_per_failure(self, emitter, trace):
        """Several invalid fields still produce a single diagnostic."""
        emitter.prepare("nowhere", "verbose", "", "")

        assert len(trace.text("error")) == 1


class TestDelivery:
    """HTTP delivery and its failure modes."""

    async def test_request_shape(self, trace, log_server):
        """POST to the endpoint with a JSON body and extra headers."""
        emitter = LogEmitter(
            LOG_API_URL,
            trace=trace,
            headers={"Authorization": "Bearer secret"},
            transport=httpx.MockTransport(log_server),
        )

        await emitter.log("frontend", "WARN", "Pkg", "Msg")

        request = log_server.requests[0]
        assert request.method == "POST"
        assert str(request.url) == LOG_API_URL
        assert request.headers["content-type"] == "application/json"
        assert request.headers["authorization"] == "Bearer secret"

    async def test_body_round_trip(self, emitter, log_server):
        """The sent body parses back into the record that was built."""
        record = emitter.prepare("Frontend", "Debug", "handlers", "Loaded 3 rows")

        await emitter.deliver(record)

        sent = log_server.requests[0].content
        assert RemoteLogRecord.model_validate_json(sent) == record
        assert log_server.payloads[0] == {
            "stack": "frontend",
            "level": "debug",
            "package": "handlers",
            "message": "Loaded 3 rows",
        }

    async def test_accepted_delivery_traces_nothing_extra(self, emitter, trace):
        """2xx responses add no trace."""
        await emitter.log("frontend", "INFO", "Pkg", "Msg")

        assert trace.channels == ["info"]

    async def test_remote_rejected(self, trace):
        """Non-2xx is traced once with status and body."""
        server = FakeLogServer(status_code=401, body="unauthorized")
        emitter = LogEmitter(LOG_API_URL, trace=trace, transport=httpx.MockTransport(server))

        await emitter.log("frontend", "INFO", "Pkg", "Msg")

        errors = trace.text("error")
        assert len(errors) == 1
        assert "401" in errors[0]
        assert "unauthorized" in errors[0]
        assert len(server.requests) == 1

    async def test_transport_fault_no_retry(self, trace):
        """A network fault means one attempt and one error trace."""
        server = FakeLogServer(error=httpx.ConnectError("Connection refused"))
        emitter = LogEmitter(LOG_API_URL, trace=trace, transport=httpx.MockTransport(server))

        await emitter.log("frontend", "INFO", "Pkg", "Msg")

        assert len(server.requests) == 1
        errors = trace.text("error")
        assert len(errors) == 1
        assert "network error" in errors[0]

    async def test_timeout_is_a_transport_fault(self, trace):
        """Timeouts are reported like other network faults."""
        server = FakeLogServer(error=httpx.ReadTimeout("timed out"))
        emitter = LogEmitter(LOG_API_URL, trace=trace, transport=httpx.MockTransport(server))

        await emitter.log("frontend", "INFO", "Pkg", "Msg")

        errors = trace.text("error")
        assert len(errors) == 1
        assert "network error" in errors[0]

    async def test_unexpected_error_is_traced(self, trace):
        """Anything else raised during delivery is traced, not raised."""
        server = FakeLogServer(error=RuntimeError("boom"))
        emitter = LogEmitter(LOG_API_URL, trace=trace, transport=httpx.MockTransport(server))

        await emitter.log("frontend", "INFO", "Pkg", "Msg")

        errors = trace.text("error")
        assert len(errors) == 1
        assert "boom" in errors[0]

    async def test_failing_trace_sink_does_not_stop_delivery(self, log_server):
        """A broken trace sink neither raises nor blocks delivery."""

        class BrokenSink(RecordingTraceSink):
            def info(self, *args):
                raise OSError("console closed")

        emitter = LogEmitter(
            LOG_API_URL,
            trace=BrokenSink(),
            transport=httpx.MockTransport(log_server),
        )

        await emitter.log("frontend", "INFO", "Pkg", "Msg")

        assert len(log_server.requests) == 1


class TestFireAndForget:
    """emit() returns before delivery completes."""

    async def test_emit_schedules_task(self, emitter, log_server):
        """Inside an event loop, delivery runs as a background task."""
        result = emitter.emit("frontend", "INFO", "Pkg", "Msg")

        assert result is None
        assert emitter.pending == 1
        assert log_server.requests == []

        await emitter.drain()

        assert emitter.pending == 0
        assert len(log_server.requests) == 1

    async def test_emit_never_raises_on_fault(self, trace):
        """Faults in background deliveries stay in the trace."""
        server = FakeLogServer(error=httpx.ConnectError("Name or service not known"))
        emitter = LogEmitter(LOG_API_URL, trace=trace, transport=httpx.MockTransport(server))

        emitter.emit("frontend", "ERROR", "Pkg", "Msg")
        await emitter.drain()

        assert trace.channels == ["error", "error"]

    async def test_concurrent_emits(self, emitter, log_server):
        """Many emits can be in flight at once; each is sent once."""
        for i in range(20):
            emitter.emit("backend", "INFO", "Pkg", f"Message {i}")

        await emitter.drain()

        messages = sorted(p["message"] for p in log_server.payloads)
        assert messages == sorted(f"Message {i}" for i in range(20))

    async def test_invalid_emit_schedules_nothing(self, emitter):
        """Rejected intents start no delivery."""
        emitter.emit("unknown-stack", "INFO", "Pkg", "Msg")

        assert emitter.pending == 0

    def test_emit_without_event_loop(self, emitter, log_server):
        """Outside an event loop, delivery runs on a worker thread."""
        emitter.emit("frontend", "INFO", "Pkg", "Msg")
        emitter.flush(timeout=5)

        assert len(log_server.requests) == 1

    def test_close_waits_for_deliveries(self, emitter, log_server):
        """close() waits for thread deliveries."""
        for i in range(5):
            emitter.emit("frontend", "INFO", "Pkg", f"Message {i}")
        emitter.close()

        assert len(log_server.requests) == 5
        assert emitter.pending == 0

    def test_emit_after_close(self, emitter, trace, log_server):
        """A closed emitter drops new thread deliveries with a trace."""
        emitter.close()

        emitter.emit("frontend", "INFO", "Pkg", "Msg")

        assert log_server.requests == []
        assert "emitter is closed" in trace.text("error")[0]
