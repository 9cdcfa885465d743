"""EventDesk conference API: attendee whitelist, job board, resumes and applications."""
