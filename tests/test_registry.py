"""
Session Registry: patient id → live connection.
"""

from consultation.registry import SessionRegistry


class TestSessionRegistry:

    def test_register_then_lookup(self, registry):
        registry.register(7, "conn-a", "Sam")
        assert registry.lookup(7) == "conn-a"
        assert registry.get(7).display_name == "Sam"

    def test_lookup_absent_patient(self, registry):
        assert registry.lookup(42) is None

    def test_numeric_and_string_ids_are_the_same_patient(self, registry):
        registry.register(7, "conn-a", "Sam")
        assert registry.lookup("7") == "conn-a"
        assert "7" in registry

    def test_register_is_idempotent(self, registry):
        registry.register(7, "conn-a", "Sam")
        registry.register(7, "conn-a", "Sam")
        assert len(registry) == 1
        assert registry.lookup(7) == "conn-a"

    def test_reconnect_replaces_previous_connection(self, registry):
        registry.register(7, "conn-old", "Sam")
        registry.register(7, "conn-new", "Sam")
        assert registry.lookup(7) == "conn-new"

    def test_stale_disconnect_does_not_remove_new_mapping(self, registry):
        registry.register(7, "conn-old", "Sam")
        registry.register(7, "conn-new", "Sam")
        assert registry.unregister("conn-old") == []
        assert registry.lookup(7) == "conn-new"

    def test_unregister_removes_mapping(self, registry):
        registry.register(7, "conn-a", "Sam")
        assert registry.unregister("conn-a") == ["7"]
        assert registry.lookup(7) is None
        assert len(registry) == 0

    def test_unregister_unknown_connection_is_noop(self, registry):
        registry.register(7, "conn-a", "Sam")
        assert registry.unregister("conn-zzz") == []
        assert len(registry) == 1

    def test_one_connection_registered_for_two_patients(self):
        registry = SessionRegistry()
        registry.register(1, "shared", "A")
        registry.register(2, "shared", "B")
        assert sorted(registry.unregister("shared")) == ["1", "2"]
