GET_USER_ACTIVE_EMOTE_SET = """
query GetUserActiveEmoteSet($username: String!) {
  users(query: $username) {
    id
    username
    connections {
      platform
      emote_set_id
    }
  }
}
"""

GET_EMOTE_SET = """
query GetEmoteSet($set_id: ObjectID!) {
  emoteSet(id: $set_id) {
    id
    name
    emotes {
      id
      name
    }
  }
}
"""

EMOTE_RENAME = """
mutation EmoteRename($set_id: ObjectID!, $emote_id: ObjectID!, $name: String!) {
  emoteSet(id: $set_id) {
    id
    emotes(id: $emote_id, action: UPDATE, name: $name) {
      id
      name
    }
  }
}
"""
