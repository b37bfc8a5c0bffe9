"""Command station side of MDU: encoding packets into level symbols."""