"""Apply Google Takeout sidecar metadata to media files through ExifTool."""
