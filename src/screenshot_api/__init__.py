"""Screenshot ingestion API: receive images over HTTP and serve them back."""
