"""Access core: permission decisions and labels for the back-office UI."""
