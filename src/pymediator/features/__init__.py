"""Feature modules built on the mediator (commands, queries, events, validators)."""
