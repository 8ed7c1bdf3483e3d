"""Core building blocks of the event bridge client."""
