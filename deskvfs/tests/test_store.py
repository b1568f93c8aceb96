"""
Node store tests: tree/index consistency and the structural primitives.
"""

import unittest

from deskvfs.exceptions import (
    EngineStateError,
    InvalidOperationError,
    NameCollisionError,
    NotADirectoryError,
    PathNotFoundError,
)
from deskvfs.filesystem.node import File, Folder
from deskvfs.filesystem.store import NodeStore


def make_store() -> NodeStore:
    store = NodeStore()
    store.init(
        Folder(children={
            'docs': Folder(children={'notes.txt': File('n')}),
            'a.txt': File('hi'),
        }),
        '/home/u/'
    )
    return store


class TestStoreInit(unittest.TestCase):
    """Test index construction."""

    def test_index_built(self):
        store = make_store()
        self.assertEqual(len(store), 4)
        self.assertIsInstance(store.get_node('/home/u/docs/'), Folder)
        self.assertEqual(store.get_node('/home/u/docs/notes.txt').content, 'n')
        self.assertEqual(store.check_consistency(), [])

    def test_lookup_is_exact(self):
        """Folder paths need their trailing separator; missing paths are None."""
        store = make_store()
        self.assertIsNone(store.get_node('/home/u/docs'))
        self.assertIsNone(store.get_node('/home/u/a.txt/'))
        self.assertIsNone(store.get_node('/nowhere'))

    def test_init_twice(self):
        store = make_store()
        with self.assertRaises(EngineStateError):
            store.init(Folder(), '/home/u/')

    def test_deep_tree(self):
        """A tree deeper than the recursion limit is indexed and walked."""
        root = Folder()
        current = root
        path = '/home/u/'
        for i in range(3000):
            child = Folder()
            current.children[f'd{i}'] = child
            current = child
            path += f'd{i}/'
        current.children['leaf.txt'] = File('x')

        store = NodeStore()
        store.init(root, '/home/u/')
        self.assertEqual(len(store), 3002)
        self.assertEqual(store.get_node(path + 'leaf.txt').content, 'x')
        self.assertEqual(store.check_consistency(), [])


class TestStoreLookups(unittest.TestCase):
    """Test read-only lookups."""

    def test_get_children_read_only(self):
        store = make_store()
        children = store.get_children('/home/u/')
        self.assertEqual(sorted(children), ['a.txt', 'docs'])
        with self.assertRaises(TypeError):
            children['x'] = File()

    def test_get_children_of_file(self):
        store = make_store()
        self.assertIsNone(store.get_children('/home/u/a.txt'))
        self.assertIsNone(store.get_children('/home/u/missing/'))

    def test_require_folder(self):
        store = make_store()
        with self.assertRaises(PathNotFoundError):
            store.require_folder('/home/u/missing/')
        with self.assertRaises(NotADirectoryError):
            store.require_folder('/home/u/a.txt')

    def test_child_path(self):
        store = make_store()
        self.assertEqual(store.child_path('/home/u/', 'docs'), '/home/u/docs/')
        self.assertEqual(store.child_path('/home/u/', 'a.txt'), '/home/u/a.txt')
        self.assertIsNone(store.child_path('/home/u/', 'b.txt'))


class TestStorePrimitives(unittest.TestCase):
    """Test attach and detach."""

    def test_attach_indexes_subtree(self):
        store = make_store()
        subtree = Folder(children={'inner': Folder(children={'x.txt': File('x')})})
        path = store.attach('/home/u/', 'new', subtree)

        self.assertEqual(path, '/home/u/new/')
        self.assertIs(store.get_node('/home/u/new/inner/x.txt'), subtree.children['inner'].children['x.txt'])
        self.assertEqual(store.check_consistency(), [])

    def test_detach_drops_subtree(self):
        store = make_store()
        node = store.detach('/home/u/', 'docs')

        self.assertIsInstance(node, Folder)
        self.assertIn('notes.txt', node.children)
        self.assertIsNone(store.get_node('/home/u/docs/'))
        self.assertIsNone(store.get_node('/home/u/docs/notes.txt'))
        self.assertEqual(store.check_consistency(), [])

    def test_attach_collision(self):
        store = make_store()
        original = store.get_node('/home/u/a.txt')
        with self.assertRaises(NameCollisionError):
            store.attach('/home/u/', 'a.txt', File('other'))
        self.assertIs(store.get_node('/home/u/a.txt'), original)

    def test_attach_invalid_names(self):
        store = make_store()
        for name in ('', 'a/b', '.', '..'):
            with self.subTest(name=name):
                with self.assertRaises(InvalidOperationError):
                    store.attach('/home/u/', name, File())
        self.assertEqual(len(store), 4)

    def test_attach_bad_parent(self):
        store = make_store()
        with self.assertRaises(NotADirectoryError):
            store.attach('/home/u/a.txt', 'x', File())
        with self.assertRaises(PathNotFoundError):
            store.attach('/home/u/missing/', 'x', File())

    def test_detach_missing(self):
        store = make_store()
        with self.assertRaises(PathNotFoundError):
            store.detach('/home/u/', 'ghost.txt')


class TestStoreQueries(unittest.TestCase):
    """Test walk, search, consistency check and export."""

    def test_walk_parents_first(self):
        store = make_store()
        paths = [path for path, _ in store.walk('/home/u/docs/')]
        self.assertEqual(paths, ['/home/u/docs/', '/home/u/docs/notes.txt'])
        self.assertEqual(list(store.walk('/home/u/missing/')), [])

    def test_search(self):
        store = make_store()
        store.attach('/home/u/', 'Notes.md', File())
        self.assertEqual(store.search('notes'), ['/home/u/Notes.md', '/home/u/docs/notes.txt'])
        self.assertEqual(store.search(r'\.txt$', '/home/u/docs/'), ['/home/u/docs/notes.txt'])

    def test_search_invalid_pattern(self):
        store = make_store()
        self.assertEqual(store.search('['), [])

    def test_consistency_detects_unindexed_node(self):
        store = make_store()
        store.root.children['ghost.txt'] = File()
        self.assertIn("reachable but not indexed: /home/u/ghost.txt", store.check_consistency())

    def test_consistency_detects_stale_index(self):
        store = make_store()
        del store.root.children['a.txt']
        self.assertIn("indexed but not reachable: /home/u/a.txt", store.check_consistency())

    def test_export_tree(self):
        store = make_store()
        exported = store.export_tree('/home/u/docs/')
        self.assertEqual(
            exported,
            {'/home/u/docs/': {'type': 'folder', 'children': {'notes.txt': {'type': 'file', 'content': 'n'}}}}
        )
        self.assertIsNone(store.export_tree('/home/u/missing/'))


if __name__ == '__main__':
    unittest.main()
