"""
GitLab GraphQL Queries.
"""

# Current user's groups with their most recent projects
GROUP_PROJECTS_QUERY = """
query {
  currentUser {
    groups(first: 6) {
      pageInfo {
        endCursor
        hasNextPage
      }
      nodes {
        id
        name
        fullPath
        avatarUrl
        path
        projects(first: 10, includeSubgroups: true) {
          nodes {
            id
            name
            fullPath
            avatarUrl
            path
            repository {
              tree {
                lastCommit {
                  authoredDate
                  author {
                    name
                    username
                    avatarUrl
                  }
                }
              }
            }
            projectMembers {
              nodes {
                createdBy {
                  name
                  avatarUrl
                  username
                }
              }
            }
          }
        }
      }
    }
  }
}
"""
