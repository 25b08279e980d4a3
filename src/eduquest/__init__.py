"""EduQuest API: gamified study tracking backend."""
