from bson import ObjectId


async def test_filters_are_returned_with_string_ids(client, db):
    board = {"_id": ObjectId(), "education_board": "CBSE", "classes": ["9", "10"]}
    await db.Filters.insert_one(board)

    response = await client.get("/api/filters/")
    assert response.status_code == 200
    assert response.json() == [{"_id": str(board["_id"]), "education_board": "CBSE", "classes": ["9", "10"]}]
