# contacts_server/api/routes.py
from ariadne import EnumType, MutationType, ObjectType, QueryType

from contacts_server.api.auth.token import issue_token
from contacts_server.api.auth.user import create_user
from contacts_server.api.db.store import PERSONS, USERS, ValidationError
from contacts_server.api.errors import BadUserInput, NotFound
from contacts_server.api.permissions import current_identity, log_mutation, require_identity

query = QueryType()
mutation = MutationType()
person = ObjectType("Person")
user = ObjectType("User")
yes_no = EnumType("YesNo", {"YES": "YES", "NO": "NO"})

PHONE_FILTERS = {
    "YES": {"phone": {"$exists": True}},
    "NO": {"phone": {"$exists": False}},
}


def _store(info):
    return info.context["store"]


def _bad_input(message, operation, invalid_arg, error):
    return BadUserInput(message, operation=operation, invalidArgs=invalid_arg, error=str(error))


def _add_friend(store, account, contact) -> bool:
    friend_ids = {f["_id"] for f in account["friends"]}
    if contact["_id"] in friend_ids:
        return False
    account["friends"] = account["friends"] + [contact]
    store.update(USERS, account)
    return True


@query.field("personCount")
def resolve_person_count(_, info):
    return _store(info).count(PERSONS)


@query.field("allPersons")
def resolve_all_persons(_, info, phone=None):
    if not phone:
        return _store(info).find(PERSONS)
    return _store(info).find(PERSONS, PHONE_FILTERS[phone])


@query.field("findPerson")
def resolve_find_person(_, info, name):
    return _store(info).find_one(PERSONS, {"name": name})


@query.field("me")
def resolve_me(_, info):
    identity = current_identity(info)
    return identity.user if identity.is_resolved else None


@person.field("address")
def resolve_address(obj, info):
    return {"street": obj["street"], "city": obj["city"]}


@person.field("id")
@user.field("id")
def resolve_id(obj, info):
    return str(obj["_id"])


@user.field("friends")
def resolve_friends(obj, info):
    # accounts returned by createUser still hold raw ids
    return _store(info).populate_friends(obj)["friends"]


@mutation.field("addPerson")
def resolve_add_person(_, info, name, street, city, phone=None):
    account = require_identity(info, "addPerson")
    store = _store(info)
    try:
        contact = store.insert(PERSONS, {"name": name, "phone": phone, "street": street, "city": city})
    except ValidationError as e:
        log_mutation(account, "addPerson", "failed", str(e))
        raise _bad_input("Saving person failed", "addPerson", name, e)
    try:
        _add_friend(store, account, contact)
    except ValidationError as e:
        # undo the insert so the contact is not left without an owner
        store.remove_matching(PERSONS, {"_id": contact["_id"]})
        log_mutation(account, "addPerson", "failed", str(e), person_id=contact["_id"])
        raise _bad_input("Saving user failed", "addPerson", name, e)
    log_mutation(account, "addPerson", "success", person_id=contact["_id"])
    return contact


@mutation.field("editNumber")
def resolve_edit_number(_, info, name, phone):
    identity = current_identity(info)
    store = _store(info)
    contact = store.find_one(PERSONS, {"name": name})
    if contact is None:
        log_mutation(identity.user, "editNumber", "failed", "person not found", name=name)
        raise NotFound(f"no person named '{name}'", invalidArgs=name)
    contact["phone"] = phone
    try:
        contact = store.update(PERSONS, contact)
    except ValidationError as e:
        log_mutation(identity.user, "editNumber", "failed", str(e))
        raise _bad_input("Saving person failed", "editNumber", phone, e)
    log_mutation(identity.user, "editNumber", "success", person_id=contact["_id"])
    return contact


@mutation.field("createUser")
def resolve_create_user(_, info, username, password=None):
    try:
        account = create_user(_store(info), username, password)
    except ValidationError as e:
        log_mutation(None, "createUser", "failed", str(e), username=username)
        raise _bad_input("Creating the user failed", "createUser", username, e)
    log_mutation(account, "createUser", "success")
    return account


@mutation.field("login")
def resolve_login(_, info, username, password):
    value = issue_token(info.context["settings"], _store(info), username, password)
    log_mutation({"username": username}, "login", "success")
    return {"value": value}


@mutation.field("addAsFriend")
def resolve_add_as_friend(_, info, name):
    account = require_identity(info, "addAsFriend")
    store = _store(info)
    contact = store.find_one(PERSONS, {"name": name})
    if contact is None:
        log_mutation(account, "addAsFriend", "failed", "person not found", name=name)
        raise NotFound(f"no person named '{name}'", invalidArgs=name)
    try:
        added = _add_friend(store, account, contact)
    except ValidationError as e:
        log_mutation(account, "addAsFriend", "failed", str(e))
        raise _bad_input("Saving user failed", "addAsFriend", name, e)
    log_mutation(account, "addAsFriend", "success" if added else "unchanged", person_id=contact["_id"])
    return account
