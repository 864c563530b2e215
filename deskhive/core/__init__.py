"""Core building blocks shared by the DeskHive components."""
