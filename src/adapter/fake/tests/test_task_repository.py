"""Unit tests for FakeTaskRepository — owner predicate on every lookup."""

import unittest

from adapter.fake.task_repository import FakeTaskRepository
from domain.model.task import Task


class TestFakeTaskRepository(unittest.TestCase):

    def setUp(self):
        self.repo = FakeTaskRepository()
        self.task = self.repo.save(Task.create(text='Mine', owner='u1'))

    def test_get_requires_matching_owner(self):
        self.assertEqual(self.repo.get(self.task.id, 'u1').text, 'Mine')
        self.assertIsNone(self.repo.get(self.task.id, 'u2'))

    def test_update_requires_matching_owner(self):
        self.assertIsNone(self.repo.update(self.task.id, 'u2', {'text': 'Theirs'}))

        updated = self.repo.update(self.task.id, 'u1', {'text': 'Still mine'})
        self.assertEqual(updated.text, 'Still mine')
        self.assertEqual(self.repo.get(self.task.id, 'u1').text, 'Still mine')

    def test_delete_requires_matching_owner(self):
        self.assertIsNone(self.repo.delete(self.task.id, 'u2'))
        self.assertIsNotNone(self.repo.get(self.task.id, 'u1'))

        self.assertEqual(self.repo.delete(self.task.id, 'u1').id, self.task.id)
        self.assertIsNone(self.repo.get(self.task.id, 'u1'))

    def test_find_filters_by_owner(self):
        self.repo.save(Task.create(text='Theirs', owner='u2'))
        self.assertEqual([t.text for t in self.repo.find('u1')], ['Mine'])
        self.assertEqual(self.repo.find('u3'), [])


if __name__ == '__main__':
    unittest.main()
