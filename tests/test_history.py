from sidepow.core.history import InMemoryHistoryStore
from tests.test_window import mc_header, sc_block, sc_id


class TestInMemoryHistoryStore:
    def test_lookup(self):
        block = sc_block(1, [mc_header(1)])
        store = InMemoryHistoryStore.from_blocks([sc_block(0), block])
        assert store.block_by_id(sc_id(1)) == block
        assert len(store) == 2
        assert sc_id(0) in store

    def test_missing(self):
        store = InMemoryHistoryStore()
        assert store.block_by_id(sc_id(9)) is None
        assert sc_id(9) not in store

    def test_add_replaces_same_id(self):
        store = InMemoryHistoryStore()
        store.add_block(sc_block(1))
        store.add_block(sc_block(1, [mc_header(2)]))
        assert len(store) == 1
        assert store.block_by_id(sc_id(1)).mainchain_block_references[0].header == mc_header(2)
