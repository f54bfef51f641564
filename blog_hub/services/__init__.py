"""
Operations that keep blogs, comments and users consistent.

    from blog_hub.services import engagement, comment_tree, lifecycle
"""
