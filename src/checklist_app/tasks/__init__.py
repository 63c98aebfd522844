"""
Task subsystem.

Components:
- task_models.py: Task record, deadline/reminder parsing, deadline status
- task_form.py: create/edit form controller with validation
- task_filters.py: category filtering, selection, bulk delete
- task_poller.py: polling loop that fires due/reminder notifications
"""
