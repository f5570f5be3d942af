"""Application layer: services orchestrating domain policies over the store ports."""
