"""Infrastructure: storage substrates, the namespacing engine, remote sync and the query client."""
