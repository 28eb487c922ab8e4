"""Due-list report rows and file exports."""
