"""Default permission catalog and per-organization system groups."""

# (code, name, description, module, sort_order)
DEFAULT_PERMISSIONS: tuple[tuple[str, str, str, str, int], ...] = (
    ("members:view", "View Members", "Can view member list and details", "members", 1),
    ("members:create", "Create Members", "Can add new members", "members", 2),
    ("members:edit", "Edit Members", "Can edit member information", "members", 3),
    ("members:delete", "Delete Members", "Can delete members", "members", 4),
    ("members:export", "Export Members", "Can export member data", "members", 5),
    ("members:import", "Import Members", "Can import member data", "members", 6),
    ("households:view", "View Households", "Can view household list and details", "households", 1),
    ("households:create", "Create Households", "Can create new households", "households", 2),
    ("households:edit", "Edit Households", "Can edit household information", "households", 3),
    ("households:delete", "Delete Households", "Can delete households", "households", 4),
    ("donations:view", "View Donations", "Can view donation records", "donations", 1),
    ("donations:create", "Create Donations", "Can record new donations", "donations", 2),
    ("donations:edit", "Edit Donations", "Can edit donation records", "donations", 3),
    ("donations:delete", "Delete Donations", "Can delete donation records", "donations", 4),
    ("donations:export", "Export Donations", "Can export donation data", "donations", 5),
    ("donations:refund", "Refund Donations", "Can process donation refunds", "donations", 6),
    ("funds:view", "View Funds", "Can view fund balances and details", "funds", 1),
    ("funds:create", "Create Funds", "Can create new funds", "funds", 2),
    ("funds:edit", "Edit Funds", "Can edit fund information", "funds", 3),
    ("funds:delete", "Delete Funds", "Can delete funds", "funds", 4),
    ("funds:transfer", "Transfer Between Funds", "Can transfer money between funds", "funds", 5),
    ("pledges:view", "View Pledges", "Can view pledge records", "pledges", 1),
    ("pledges:create", "Create Pledges", "Can create new pledges", "pledges", 2),
    ("pledges:edit", "Edit Pledges", "Can edit pledge records", "pledges", 3),
    ("pledges:delete", "Delete Pledges", "Can delete pledge records", "pledges", 4),
    ("expenses:view", "View Expenses", "Can view expense records", "expenses", 1),
    ("expenses:create", "Create Expenses", "Can log new expenses", "expenses", 2),
    ("expenses:edit", "Edit Expenses", "Can edit expense records", "expenses", 3),
    ("expenses:delete", "Delete Expenses", "Can delete expense records", "expenses", 4),
    ("expenses:approve", "Approve Expenses", "Can approve expense requests", "expenses", 5),
    ("education:view", "View Education", "Can view classes and enrollments", "education", 1),
    ("education:create", "Create Classes", "Can create new classes", "education", 2),
    ("education:edit", "Edit Classes", "Can edit class information", "education", 3),
    ("education:delete", "Delete Classes", "Can delete classes", "education", 4),
    ("education:enroll", "Manage Enrollments", "Can enroll/unenroll students", "education", 5),
    ("education:grades", "Manage Grades", "Can enter and edit grades", "education", 6),
    ("cases:view", "View Cases", "Can view service cases", "cases", 1),
    ("cases:create", "Create Cases", "Can create new cases", "cases", 2),
    ("cases:edit", "Edit Cases", "Can edit case information", "cases", 3),
    ("cases:delete", "Delete Cases", "Can delete cases", "cases", 4),
    ("cases:assign", "Assign Cases", "Can assign cases to staff", "cases", 5),
    ("cases:close", "Close Cases", "Can close/resolve cases", "cases", 6),
    ("umrah:view", "View Umrah Trips", "Can view Umrah trip details", "umrah", 1),
    ("umrah:create", "Create Umrah Trips", "Can create new Umrah trips", "umrah", 2),
    ("umrah:edit", "Edit Umrah Trips", "Can edit trip information", "umrah", 3),
    ("umrah:delete", "Delete Umrah Trips", "Can delete trips", "umrah", 4),
    ("umrah:manage", "Manage Pilgrims", "Can manage pilgrim registrations", "umrah", 5),
    ("qurbani:view", "View Qurbani", "Can view Qurbani campaigns", "qurbani", 1),
    ("qurbani:create", "Create Campaigns", "Can create new campaigns", "qurbani", 2),
    ("qurbani:edit", "Edit Campaigns", "Can edit campaign information", "qurbani", 3),
    ("qurbani:delete", "Delete Campaigns", "Can delete campaigns", "qurbani", 4),
    ("qurbani:manage", "Manage Shares", "Can manage share registrations", "qurbani", 5),
    ("services:view", "View Islamic Services", "Can view service records", "services", 1),
    ("services:create", "Create Services", "Can create new service records", "services", 2),
    ("services:edit", "Edit Services", "Can edit service records", "services", 3),
    ("services:delete", "Delete Services", "Can delete service records", "services", 4),
    ("services:schedule", "Schedule Services", "Can schedule services", "services", 5),
    ("announcements:view", "View Announcements", "Can view announcements", "announcements", 1),
    ("announcements:create", "Create Announcements", "Can create announcements", "announcements", 2),
    ("announcements:edit", "Edit Announcements", "Can edit announcements", "announcements", 3),
    ("announcements:delete", "Delete Announcements", "Can delete announcements", "announcements", 4),
    ("announcements:publish", "Publish Announcements", "Can publish/unpublish announcements", "announcements", 5),
    ("reports:view", "View Reports", "Can view basic reports", "reports", 1),
    ("reports:financial", "Financial Reports", "Can view financial reports", "reports", 2),
    ("reports:membership", "Membership Reports", "Can view membership reports", "reports", 3),
    ("reports:export", "Export Reports", "Can export reports", "reports", 4),
    ("settings:view", "View Settings", "Can view organization settings", "settings", 1),
    ("settings:edit", "Edit Settings", "Can edit organization settings", "settings", 2),
    ("settings:billing", "Manage Billing", "Can manage billing and subscription", "settings", 3),
    ("settings:integrations", "Manage Integrations", "Can manage third-party integrations", "settings", 4),
    ("permissions:view", "View Permissions", "Can view permission groups", "permissions", 1),
    ("permissions:manage", "Manage Permissions", "Can create/edit permission groups", "permissions", 2),
)

# Seeded for every organization with is_system=True.
# Selectors: "all", ("modules", [...]) or ("action", ":view")
SYSTEM_GROUPS: tuple[dict, ...] = (
    {
        "name": "Administrators",
        "description": "Full administrative access to all modules",
        "selector": ("all", None),
    },
    {
        "name": "Finance Team",
        "description": "Access to financial modules (donations, funds, expenses, reports)",
        "selector": ("modules", ["donations", "funds", "pledges", "expenses", "reports"]),
    },
    {
        "name": "Education Team",
        "description": "Access to education module",
        "selector": ("modules", ["education"]),
    },
    {
        "name": "Viewers",
        "description": "Read-only access to basic information",
        "selector": ("action", ":view"),
    },
)
