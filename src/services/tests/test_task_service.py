"""Unit tests for task_service — ownership scoping and completion stamping."""

import unittest

from adapter.fake.task_repository import FakeTaskRepository
from domain.model.errors import NotFoundError, ValidationError
from services import task_service

OWNER_A = 'user-a'
OWNER_B = 'user-b'


class TestCreateAndList(unittest.TestCase):

    def setUp(self):
        self.repo = FakeTaskRepository()

    def test_create_task_sets_owner_and_defaults(self):
        task = task_service.create_task(self.repo, OWNER_A, '  Walk the dog ')

        self.assertEqual(task.text, 'Walk the dog')
        self.assertEqual(task.owner, OWNER_A)
        self.assertFalse(task.completed)
        self.assertIsNone(task.completed_at)

    def test_create_task_rejects_blank_text(self):
        for text in ['', '   ']:
            with self.subTest(text=text):
                with self.assertRaises(ValidationError):
                    task_service.create_task(self.repo, OWNER_A, text)
        self.assertEqual(self.repo.store, {})

    def test_list_returns_only_own_tasks(self):
        task_service.create_task(self.repo, OWNER_A, 'First')
        task_service.create_task(self.repo, OWNER_B, 'Other')
        task_service.create_task(self.repo, OWNER_A, 'Second')

        tasks = task_service.list_tasks(self.repo, OWNER_A)

        self.assertEqual([t.text for t in tasks], ['First', 'Second'])
        self.assertTrue(all(t.owner == OWNER_A for t in tasks))


class TestOwnership(unittest.TestCase):

    def setUp(self):
        self.repo = FakeTaskRepository()
        self.task = task_service.create_task(self.repo, OWNER_A, 'Private')

    def test_owner_can_read(self):
        self.assertEqual(task_service.get_task(self.repo, OWNER_A, self.task.id).text, 'Private')

    def test_other_user_gets_not_found_on_read(self):
        with self.assertRaises(NotFoundError):
            task_service.get_task(self.repo, OWNER_B, self.task.id)

    def test_other_user_gets_not_found_on_update(self):
        with self.assertRaises(NotFoundError):
            task_service.update_task(self.repo, OWNER_B, self.task.id, text='Hijacked')
        self.assertEqual(self.repo.store[self.task.id].text, 'Private')

    def test_other_user_gets_not_found_on_delete(self):
        with self.assertRaises(NotFoundError):
            task_service.delete_task(self.repo, OWNER_B, self.task.id)
        self.assertIn(self.task.id, self.repo.store)

    def test_not_owned_and_missing_look_the_same(self):
        with self.assertRaises(NotFoundError) as not_owned:
            task_service.get_task(self.repo, OWNER_B, self.task.id)
        with self.assertRaises(NotFoundError) as missing:
            task_service.get_task(self.repo, OWNER_B, 'no-such-task')
        self.assertEqual(str(not_owned.exception), str(missing.exception))

    def test_owner_delete_then_lookup_is_not_found(self):
        deleted = task_service.delete_task(self.repo, OWNER_A, self.task.id)

        self.assertEqual(deleted.id, self.task.id)
        for owner in (OWNER_A, OWNER_B):
            with self.assertRaises(NotFoundError):
                task_service.get_task(self.repo, owner, self.task.id)


class TestUpdateTask(unittest.TestCase):

    def setUp(self):
        self.repo = FakeTaskRepository()
        self.task = task_service.create_task(self.repo, OWNER_A, 'Original')

    def test_completing_stamps_completed_at(self):
        task = task_service.update_task(self.repo, OWNER_A, self.task.id, text='Updated', completed=True)

        self.assertEqual(task.text, 'Updated')
        self.assertTrue(task.completed)
        self.assertIsInstance(task.completed_at, int)

    def test_uncompleting_clears_completed_at(self):
        task_service.update_task(self.repo, OWNER_A, self.task.id, completed=True)
        task = task_service.update_task(self.repo, OWNER_A, self.task.id, completed=False)

        self.assertFalse(task.completed)
        self.assertIsNone(task.completed_at)

    def test_text_only_update_leaves_completion(self):
        done = task_service.update_task(self.repo, OWNER_A, self.task.id, completed=True)
        task = task_service.update_task(self.repo, OWNER_A, self.task.id, text='Renamed')

        self.assertTrue(task.completed)
        self.assertEqual(task.completed_at, done.completed_at)

    def test_empty_update_returns_current_task(self):
        task = task_service.update_task(self.repo, OWNER_A, self.task.id)
        self.assertEqual(task.text, 'Original')

    def test_empty_update_on_foreign_task_is_not_found(self):
        with self.assertRaises(NotFoundError):
            task_service.update_task(self.repo, OWNER_B, self.task.id)

    def test_blank_text_rejected(self):
        with self.assertRaises(ValidationError):
            task_service.update_task(self.repo, OWNER_A, self.task.id, text=' ')

    def test_owner_never_changes(self):
        task = task_service.update_task(self.repo, OWNER_A, self.task.id, text='x', completed=True)
        self.assertEqual(task.owner, OWNER_A)


if __name__ == '__main__':
    unittest.main()
