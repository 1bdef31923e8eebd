"""
Integration tests for query and upload flows through the Uplink
"""
import json
import queue
import threading

import pytest

from cockpit_uplink.builders import CommandBuilder, QueryBuilder, UploadAgent
from cockpit_uplink.core import Uplink
from cockpit_uplink.errors import UnknownActionError


class FakeRemote:
    """
    Stands in for the in-simulator interpreter: takes streams from the
    sender and answers queries on its own thread with telemetry packets.
    """

    def __init__(self, pages):
        self.pages = pages
        self.inbox = queue.Queue()
        self.uplink = None
        self.streams = []
        self.thread = threading.Thread(target=self._run, daemon=True)

    def send(self, payload):
        self.inbox.put(payload)
        return True

    def start(self):
        self.thread.start()

    def stop(self):
        self.inbox.put(None)
        self.thread.join(timeout=5.0)

    def _run(self):
        while True:
            payload = self.inbox.get()
            if payload is None:
                return
            stream = json.loads(payload)
            self.streams.append(stream)
            marker = None
            for command in stream:
                if command["f"] == "Mark":
                    marker = command["a"]["mark"]
                    self._telemetry(Marker=marker)
                elif command["f"] == "Query":
                    device = command["a"].get("prm", [""])[0]
                    self._telemetry(Marker=marker, Response=self.pages.get(device, ""))

    def _telemetry(self, **fields):
        packet = {"Model": "F-16C_50"}
        packet.update({key: value for key, value in fields.items() if value is not None})
        self.uplink.handle_telemetry_data(json.dumps(packet))


@pytest.fixture
def remote_uplink(temp_config_file):
    remote = FakeRemote({"UFC": "CNI", "LMFD": "FCR"})
    uplink = Uplink(remote.send, temp_config_file, apply_logging=False)
    remote.uplink = uplink
    remote.start()
    yield remote, uplink
    uplink.stop()
    remote.stop()


class RadioBuilder(CommandBuilder):
    def build(self, context=None):
        ufc = self.get_device("UFC")
        self.add_if_block("IsOnPage", False, ["COM1"], lambda: self.add_action(ufc, "LIST", self.WAIT_BASE))
        self.add_value_entry(ufc, context.get("preset") if context else None)


class ViperUploadAgent(UploadAgent):
    def __init__(self, sender, registry):
        super().__init__(sender)
        self.registry = registry

    def build_systems(self, builder, context=None):
        builder.add_build(RadioBuilder(self.registry), {"preset": "12"})


class TestQueryFlow:
    """End-to-end tests for the query and upload flows"""

    def test_query_round_trip(self, remote_uplink):
        """Test a query is answered through telemetry"""
        remote, uplink = remote_uplink
        assert uplink.query("GetPage", ["UFC"]) == "CNI"
        assert uplink.query("GetPage", ["LMFD"]) == "FCR"
        status = uplink.get_status()
        assert status["query"]["responses_received"] == 2
        assert status["telemetry"]["packets_parsed"] >= 2

    def test_unanswered_query_times_out(self, remote_uplink):
        """Test a query the remote answers with an empty response times out"""
        remote, uplink = remote_uplink
        assert uplink.query("GetPage", ["HUD"], timeout=0.2) is None
        assert uplink.get_status()["query"]["timeouts"] == 1

    def test_query_builder_round_trip(self, remote_uplink, registry):
        """Test a query builder with setup commands"""
        remote, uplink = remote_uplink

        class PageQuery(QueryBuilder):
            def build(self, context=None):
                self.add_action(self.get_device("UFC"), "RTN")
                self.add_marker("query")
                super().build(context)

        builder = PageQuery(registry, fn="GetPage", args=["UFC"])
        assert uplink.run_query(builder) == "CNI"
        assert [cmd["f"] for cmd in remote.streams[-1]] == ["Actn", "Mark", "Query"]

    def test_upload(self, remote_uplink, registry):
        """Test an upload reaches the remote in one stream"""
        remote, uplink = remote_uplink
        assert uplink.upload(ViperUploadAgent(remote.send, registry)) is True

        # A query after the upload is answered, so the upload was processed first
        assert uplink.query("GetPage", ["UFC"]) == "CNI"
        upload = remote.streams[0]
        assert [cmd["f"] for cmd in upload] == [
            "Exec", "Mark", "If", "Actn", "Wait", "EndIf", "Actn", "Actn", "Actn", "Mark"
        ]
        assert uplink.get_status()["uploads_sent"] == 1
        assert uplink.telemetry_parser.last_marker == "<upload_prog>"

    def test_stop_refuses_work(self, remote_uplink, registry):
        """Test a stopped uplink drops queries and uploads"""
        remote, uplink = remote_uplink
        uplink.stop()
        assert uplink.query("GetPage", ["UFC"]) is None
        assert uplink.upload(UploadAgent(remote.send)) is False

    def test_malformed_telemetry_counted(self, remote_uplink):
        """Test malformed packets are counted and ignored"""
        remote, uplink = remote_uplink
        assert uplink.handle_telemetry_data("not json") is None
        assert uplink.get_status()["error_count"] == 1


@pytest.fixture
def strict_uplink(temp_config_file, sender):
    with open(temp_config_file, 'w') as f:
        json.dump({"builder": {"strict_actions": True}}, f)
    uplink = Uplink(sender, temp_config_file, apply_logging=False)
    yield uplink
    uplink.stop()


class TypoQuery(QueryBuilder):
    def build(self, context=None):
        self.add_action(self.get_device("UFC"), "NOPE")
        super().build(context)


class TypoUploadAgent(ViperUploadAgent):
    def build_systems(self, builder, context=None):
        builder.add_build(TypoQuery(self.registry, fn="GetPage"), context)


class TestStrictActions:
    """Tests for the builder.strict_actions setting"""

    def test_run_query_raises_before_sending(self, strict_uplink, registry, sender):
        """Test an unknown action in a query builder raises and sends nothing"""
        assert strict_uplink.strict_actions is True
        builder = TypoQuery(registry, fn="GetPage", args=["UFC"])
        with pytest.raises(UnknownActionError):
            strict_uplink.run_query(builder, timeout=0.01)
        assert sender.payloads == []
        assert builder.strict is False

    def test_upload_raises_before_sending(self, strict_uplink, registry, sender):
        """Test an unknown action in an upload translator raises and sends nothing"""
        agent = TypoUploadAgent(sender, registry)
        with pytest.raises(UnknownActionError):
            strict_uplink.upload(agent)
        assert sender.payloads == []
        assert agent.strict is False

    def test_lenient_by_default(self, temp_config_file, registry, sender):
        """Test the default settings skip unknown actions"""
        uplink = Uplink(sender, temp_config_file, apply_logging=False)
        assert uplink.run_query(TypoQuery(registry, fn="GetPage"), timeout=0.01) is None
        assert json.loads(sender.payloads[0]) == [{"f": "Query", "a": {"fn": "GetPage"}}]
        uplink.stop()
