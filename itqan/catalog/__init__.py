"""Asset catalog: mock data, search and the dashboard view state."""
