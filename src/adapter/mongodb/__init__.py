USERS_COLLECTION_NAME = 'users'
TASKS_COLLECTION_NAME = 'tasks'
