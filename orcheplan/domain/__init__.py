"""Domain layer for orcheplan.

Pure models and rules with no I/O:

- shared: Result monad, error vocabulary, base domain event
- access: role lattice and the operation -> required role table
- project: projects, memberships and forest walks
- task: tasks, comments and sub-task forest walks
- status: workflow statuses, colour derivation and ordering
"""
