# contacts_server/api/schema.py
"""
GraphQL SDL exported as a Python string named type_defs.
Resolvers for these types live in routes.py.
"""

type_defs = """
schema {
  query: Query
  mutation: Mutation
}

type User {
  username: String!
  friends: [Person!]!
  id: ID!
}

type Token {
  value: String!
}

type Address {
  street: String!
  city: String!
}

type Person {
  name: String!
  phone: String
  address: Address!
  id: ID!
}

enum YesNo {
  YES
  NO
}

type Query {
  personCount: Int!
  allPersons(phone: YesNo): [Person!]!
  findPerson(name: String!): Person
  me: User
}

type Mutation {
  addPerson(name: String!, phone: String, street: String!, city: String!): Person
  editNumber(name: String!, phone: String!): Person
  # password is optional; accounts without one log in with the shared login secret
  createUser(username: String!, password: String): User
  login(username: String!, password: String!): Token
  addAsFriend(name: String!): User
}
"""
