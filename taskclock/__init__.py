"""taskclock - task management and time tracking backend."""
