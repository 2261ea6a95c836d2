"""Generic request pipeline: errors, logging, preparers, senders and responders."""
