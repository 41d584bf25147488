USERS_TABLE_NAME = 'users'
MESSAGES_TABLE_NAME = 'messages'
