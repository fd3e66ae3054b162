"""dwmyo - calendar task tracker with iCalendar import/export."""
