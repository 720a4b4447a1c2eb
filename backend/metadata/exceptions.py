class LayoutNotFound(Exception):
    """Neither the company nor the default layout exists"""

    def __init__(self, object_code, view_type, company_id=None):
        self.object_code = object_code
        self.view_type = view_type
        self.company_id = company_id
        super().__init__(
            f"No {view_type} layout for {object_code}: "
            f"no layout for company {company_id} and no default layout"
        )
