import os
import tempfile
import unittest
from unittest import mock

from tests._support import make_tree
from walked.core import file_operations as ops
from walked.core.errors import (
    AllocationExhausted,
    Message,
    PathAllocationError,
    PathKind,
    PathNotFound,
    PermissionDenied,
)


class AllocatePathTests(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory(dir=os.getcwd())
        self.addCleanup(self.tmp.cleanup)
        self.root = self.tmp.name

    def test_missing_path_is_returned_unchanged(self):
        path = os.path.join(self.root, 'free.txt')
        self.assertEqual(ops.allocate_path(path), path)

    def test_existing_path_gets_suffix_until_free(self):
        make_tree(self.root, {'a.txt': 'a', 'a.txt.1': 'b'})
        path = os.path.join(self.root, 'a.txt')

        result = ops.allocate_path(path)

        self.assertEqual(result, path + '.1.1')
        self.assertTrue(result.startswith(path))
        self.assertFalse(os.path.exists(result))

    def test_dangling_symlink_counts_as_taken(self):
        link = os.path.join(self.root, 'dangling')
        os.symlink(os.path.join(self.root, 'nowhere'), link)
        self.assertEqual(ops.allocate_path(link), link + '.1')

    def test_attempt_cap_raises(self):
        make_tree(self.root, {'n': '', 'n.1': '', 'n.1.1': ''})
        path = os.path.join(self.root, 'n')

        with self.assertRaises(PathAllocationError) as ctx:
            ops.allocate_path(path, max_attempts=3)

        self.assertEqual(ctx.exception.path, path)
        self.assertEqual(ctx.exception.attempts, 3)
        self.assertEqual(ctx.exception.to_walked_error(), AllocationExhausted(path, 3))


class ListingTests(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory(dir=os.getcwd())
        self.addCleanup(self.tmp.cleanup)
        self.root = self.tmp.name
        make_tree(self.root, {'f.txt': 'x', 'd': {}})
        os.symlink(os.path.join(self.root, 'missing'), os.path.join(self.root, 'ln'))

    def test_list_directory_returns_full_paths(self):
        entries = ops.list_directory(self.root)
        self.assertEqual(
            sorted(entries),
            sorted(os.path.join(self.root, name) for name in ('f.txt', 'd', 'ln')),
        )

    def test_list_directory_raises_for_missing(self):
        with self.assertRaises(FileNotFoundError):
            ops.list_directory(os.path.join(self.root, 'nope'))

    def test_entry_type(self):
        self.assertEqual(ops.entry_type(os.path.join(self.root, 'f.txt')), 'file')
        self.assertEqual(ops.entry_type(os.path.join(self.root, 'd')), 'dir')
        self.assertEqual(ops.entry_type(os.path.join(self.root, 'ln')), 'symlink')

    def test_is_same_or_inside(self):
        sub = os.path.join(self.root, 'd')
        self.assertTrue(ops.is_same_or_inside(sub, self.root))
        self.assertTrue(ops.is_same_or_inside(self.root, self.root))
        self.assertFalse(ops.is_same_or_inside(self.root, sub))
        self.assertFalse(ops.is_same_or_inside(self.root + 'x', self.root))


class CreateAndRenameTests(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory(dir=os.getcwd())
        self.addCleanup(self.tmp.cleanup)
        self.root = self.tmp.name

    def test_create_file_and_directory(self):
        errors = []
        f = os.path.join(self.root, 'NEWFILE')
        d = os.path.join(self.root, 'NEWDIR')

        self.assertTrue(ops.create_entry(f, errors, is_directory=False))
        self.assertTrue(ops.create_entry(d, errors, is_directory=True))

        self.assertTrue(os.path.isfile(f))
        self.assertTrue(os.path.isdir(d))
        self.assertEqual(errors, [])

    def test_create_in_missing_directory_queues_not_found(self):
        errors = []
        path = os.path.join(self.root, 'missing', 'NEWFILE')

        self.assertFalse(ops.create_entry(path, errors, is_directory=False))

        self.assertEqual(errors, [PathNotFound(path, PathKind.FILE)])

    def test_create_existing_file_queues_message(self):
        make_tree(self.root, {'NEWFILE': ''})
        errors = []

        ops.create_entry(os.path.join(self.root, 'NEWFILE'), errors, is_directory=False)

        self.assertEqual(len(errors), 1)
        self.assertIsInstance(errors[0], Message)
        self.assertIn("Couldn't create file", errors[0].describe())

    def test_rename(self):
        make_tree(self.root, {'a': 'x'})
        errors = []
        src = os.path.join(self.root, 'a')
        dst = os.path.join(self.root, 'b')

        self.assertTrue(ops.rename_entry(src, dst, errors))

        self.assertFalse(os.path.exists(src))
        self.assertTrue(os.path.exists(dst))

    def test_rename_missing_source(self):
        errors = []
        src = os.path.join(self.root, 'a')

        self.assertFalse(ops.rename_entry(src, os.path.join(self.root, 'b'), errors))

        self.assertEqual(errors, [PathNotFound(src, PathKind.AMBIGUOUS)])


class CopyTests(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory(dir=os.getcwd())
        self.addCleanup(self.tmp.cleanup)
        self.root = self.tmp.name

    def _count(self, path):
        files = dirs = 0
        for _root, dirnames, filenames in os.walk(path):
            dirs += len(dirnames)
            files += len(filenames)
        return files, dirs

    def test_copy_file(self):
        make_tree(self.root, {'a.txt': 'hello'})
        errors = []
        dst = os.path.join(self.root, 'b.txt')

        self.assertTrue(ops.copy_entry(os.path.join(self.root, 'a.txt'), dst, errors))

        with open(dst, encoding='utf-8') as fh:
            self.assertEqual(fh.read(), 'hello')
        self.assertEqual(errors, [])

    def test_copy_tree_preserves_structure(self):
        make_tree(self.root, {'src': {'a': '1', 'sub': {'b': '2', 'deep': {'c': '3'}}, 'empty': {}}})
        errors = []
        src = os.path.join(self.root, 'src')
        dst = os.path.join(self.root, 'dst')

        self.assertTrue(ops.copy_entry(src, dst, errors))

        self.assertEqual(errors, [])
        self.assertEqual(self._count(dst), self._count(src))
        with open(os.path.join(dst, 'sub', 'deep', 'c'), encoding='utf-8') as fh:
            self.assertEqual(fh.read(), '3')

    def test_copy_tree_keeps_going_after_a_failure(self):
        make_tree(self.root, {'src': {'bad': 'x', 'good': {'f': 'y'}, 'other': 'z'}})
        src = os.path.join(self.root, 'src')
        dst = os.path.join(self.root, 'dst')
        os.mkdir(dst)
        errors = []
        real_copy2 = ops.shutil.copy2

        def flaky_copy2(source, destination, *args, **kwargs):
            if os.path.basename(source) == 'bad':
                raise PermissionError(13, 'Permission denied')
            return real_copy2(source, destination, *args, **kwargs)

        with mock.patch.object(ops.shutil, 'copy2', side_effect=flaky_copy2):
            ops.copy_tree_contents(src, dst, errors)

        self.assertEqual(errors, [PermissionDenied(os.path.join(dst, 'bad'), PathKind.FILE)])
        self.assertTrue(os.path.exists(os.path.join(dst, 'good', 'f')))
        self.assertTrue(os.path.exists(os.path.join(dst, 'other')))
        self.assertFalse(os.path.exists(os.path.join(dst, 'bad')))

    def test_copy_tree_does_not_follow_directory_symlinks(self):
        make_tree(self.root, {'src': {'real': {'f': 'x'}}, 'outside': {'g': 'y'}})
        src = os.path.join(self.root, 'src')
        os.symlink(os.path.join(self.root, 'outside'), os.path.join(src, 'link'))
        dst = os.path.join(self.root, 'dst')
        errors = []

        ops.copy_entry(src, dst, errors)

        self.assertTrue(os.path.exists(os.path.join(dst, 'real', 'f')))
        self.assertFalse(os.path.lexists(os.path.join(dst, 'link')))
        self.assertEqual(errors, [])

    def test_copy_entry_follows_top_level_directory_symlink(self):
        make_tree(self.root, {'real': {'f': 'x', 'sub': {'g': 'y'}}})
        link = os.path.join(self.root, 'link')
        os.symlink(os.path.join(self.root, 'real'), link)
        dst = os.path.join(self.root, 'dst')
        errors = []

        self.assertTrue(ops.copy_entry(link, dst, errors))

        self.assertFalse(os.path.islink(dst))
        self.assertTrue(os.path.isfile(os.path.join(dst, 'f')))
        self.assertTrue(os.path.isfile(os.path.join(dst, 'sub', 'g')))
        self.assertEqual(errors, [])

    def test_copy_entry_reports_uncopyable_source(self):
        link = os.path.join(self.root, 'dangling')
        os.symlink(os.path.join(self.root, 'missing'), link)
        errors = []

        self.assertFalse(ops.copy_entry(link, os.path.join(self.root, 'x'), errors))

        self.assertEqual(len(errors), 1)
        self.assertIsInstance(errors[0], Message)
        self.assertIn('not a file or directory', errors[0].describe())
        self.assertFalse(os.path.lexists(os.path.join(self.root, 'x')))

    def test_copy_missing_source(self):
        errors = []
        src = os.path.join(self.root, 'gone')

        self.assertFalse(ops.copy_entry(src, os.path.join(self.root, 'x'), errors))

        self.assertEqual(errors, [PathNotFound(src, PathKind.AMBIGUOUS)])

    def test_copy_directory_into_itself_is_refused(self):
        make_tree(self.root, {'d': {'f': 'x'}})
        src = os.path.join(self.root, 'd')
        errors = []

        self.assertFalse(ops.copy_entry(src, os.path.join(src, 'd'), errors))

        self.assertEqual(len(errors), 1)
        self.assertIn('into itself', errors[0].describe())
        self.assertEqual(os.listdir(src), ['f'])


class RemoveTests(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory(dir=os.getcwd())
        self.addCleanup(self.tmp.cleanup)
        self.root = self.tmp.name

    def test_non_empty_directory_uses_rmtree(self):
        make_tree(self.root, {'d': {'f': 'x', 's': {'g': 'y'}}})
        path = os.path.join(self.root, 'd')
        errors = []

        with mock.patch.object(ops.shutil, 'rmtree', wraps=ops.shutil.rmtree) as rmtree:
            ops.remove_entry(path, errors)

        rmtree.assert_called_once_with(path)
        self.assertFalse(os.path.exists(path))
        self.assertEqual(errors, [])

    def test_empty_directory_is_never_removed_recursively(self):
        make_tree(self.root, {'d': {}})
        path = os.path.join(self.root, 'd')

        with mock.patch.object(ops.shutil, 'rmtree') as rmtree:
            ops.remove_entry(path, [])

        rmtree.assert_not_called()
        self.assertFalse(os.path.exists(path))

    def test_file_never_touches_directory_removal(self):
        make_tree(self.root, {'f': 'x'})
        path = os.path.join(self.root, 'f')

        with mock.patch.object(ops.shutil, 'rmtree') as rmtree, \
                mock.patch.object(ops.os, 'rmdir') as rmdir:
            ops.remove_entry(path, [])

        rmtree.assert_not_called()
        rmdir.assert_not_called()
        self.assertFalse(os.path.exists(path))

    def test_symlink_to_directory_removes_only_the_link(self):
        make_tree(self.root, {'target': {'keep': 'x'}})
        link = os.path.join(self.root, 'link')
        os.symlink(os.path.join(self.root, 'target'), link)

        ops.remove_entry(link, [])

        self.assertFalse(os.path.lexists(link))
        self.assertTrue(os.path.exists(os.path.join(self.root, 'target', 'keep')))

    def test_missing_file_is_reported(self):
        path = os.path.join(self.root, 'nope')
        errors = []

        ops.remove_entry(path, errors)

        self.assertEqual(errors, [PathNotFound(path, PathKind.FILE)])


if __name__ == '__main__':
    unittest.main()
