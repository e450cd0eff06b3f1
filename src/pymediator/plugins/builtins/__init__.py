"""Built-in plugins shipped with pymediator."""
